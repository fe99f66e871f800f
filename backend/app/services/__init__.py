"""Services package for streak and activity tracking."""
