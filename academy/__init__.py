"""Academy cohort service: readiness, mastery, live sessions and intel drops."""
