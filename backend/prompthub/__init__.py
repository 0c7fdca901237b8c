"""PromptHub API: browse, save and moderate AI prompts."""
