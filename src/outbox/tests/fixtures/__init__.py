"""Message types shared by the unit and integration tests."""
