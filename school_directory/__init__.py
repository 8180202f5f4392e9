"""School directory service: submission and listing of school records."""
