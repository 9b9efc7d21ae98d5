"""Interactive issue-triage chat session.

Structure:
- triagechat/agent/: Backend side
  - client.py: Backend protocol and create_backend()
  - config.py: Configuration via pydantic-settings
  - gemini.py: Gemini backend (google-genai)
  - claude.py: Claude backend (claude-agent-sdk)
  - prompts.py: Priming pair (instruction prompt and acknowledgment)

- triagechat/lib/: Reusable pieces
  - credentials.py: Secret lookup (environment, netrc)
  - protocol.py: <request>/<response>/<go ...> tag framing
  - retry.py: Retry decorator for backend HTTP calls
  - transcript.py: Append-only conversation history

- triagechat/environment/: Operator-facing harness
  - session.py: The read/call/print session loop
  - issues.py: Issue model and triage-function registry
  - cli/__main__.py: Entry point
"""

__version__ = "0.1.0"
