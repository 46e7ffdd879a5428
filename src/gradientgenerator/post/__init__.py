"""Post-processing of the finished mesh: boundary loops and vector paths."""
