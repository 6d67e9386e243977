"""HTTP front end for the Skull engine."""
