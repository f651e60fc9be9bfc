"""Company users: roles, team members and project permissions."""
