"""Domain applications of the club reservations service."""
