"""Portfolio tracker backed by a Google Sheets workbook."""
