"""External collaborators: question sources, analysis, history and identity."""
