"""FusionSolar relay backend."""
