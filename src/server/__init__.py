"""HTTP front end for siteweave."""
