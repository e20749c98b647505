"""Export of the entry collection as CSV, PNG charts and a PDF report."""
