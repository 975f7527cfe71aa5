"""Report exporters: delimited text, styled workbook, JSON."""
