"""Business logic. Routes call services, services call the database."""
