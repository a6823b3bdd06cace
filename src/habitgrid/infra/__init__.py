"""Infrastructure layer: database plumbing, repositories and the session store."""
