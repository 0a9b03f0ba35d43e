"""Agent Observatory - OpenClaw session log summaries and fleet statistics."""
