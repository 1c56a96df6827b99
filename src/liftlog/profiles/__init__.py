"""Body composition and energy expenditure calculations."""
