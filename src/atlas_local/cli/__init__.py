"""atlas-local CLI - manage local MongoDB Atlas deployments."""
