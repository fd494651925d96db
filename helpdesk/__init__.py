"""Help desk ticket tracking toolkit."""
