"""Review a GitHub pull request with an LLM and post the findings as inline comments."""
