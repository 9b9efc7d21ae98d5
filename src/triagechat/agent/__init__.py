"""Backend side of the triage chat.

- client.py: Backend protocol, credential chain and create_backend()
- config.py: Configuration via pydantic-settings
- gemini.py / claude.py: Concrete backends
- prompts.py: Priming pair
"""
