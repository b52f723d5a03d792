"""Pet adoption backend with a suspicious-activity monitor."""
