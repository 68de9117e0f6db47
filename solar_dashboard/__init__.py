"""FusionSolar polling dashboard."""
