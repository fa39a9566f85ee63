"""Domain model: claims, sessions, permission rules and errors."""
