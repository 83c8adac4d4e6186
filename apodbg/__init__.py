"""APOD Background - NASA's Astronomy Picture of the Day as a page background."""
