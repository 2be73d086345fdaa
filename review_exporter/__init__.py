"""Core logic for the Review Data Exporter.

The Gradio UI lives in `app.py`. This package contains pure functions that:
- merge uploaded JSON review documents into one collection
- filter reviews by star rating and select export fields
- serialize the selected view to BOM-prefixed CSV text
- build preview rows and status summaries
"""
