"""Console front-end for the card room."""
