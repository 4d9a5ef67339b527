"""Business logic on top of the portfolio spreadsheet."""
