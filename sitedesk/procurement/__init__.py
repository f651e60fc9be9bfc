"""Purchase requisitions."""
