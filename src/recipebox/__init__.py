"""Recipe import, ingredient parsing and shopping list generation."""
