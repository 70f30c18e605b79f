"""Prompt templates for chat and campaign generation.

Templates use Python string placeholders ({variable_name}).
"""

CHAT_SYSTEM_PROMPT = """You are a helpful assistant for client outreach and marketing. \
You will be given a JSON "client_db_context" that contains summary information and up to \
{cap} filtered clients, each with only key fields (names, emails, company, location). Use it \
to answer questions. If the user asks about clients beyond what you see, say that you only \
have access to the first {cap} filtered clients."""

CHAT_CONTEXT_PROMPT = """Here is the current client database context (up to {cap} filtered \
clients):
{context_json}"""

# Sent as-is, without formatting
CAMPAIGN_SYSTEM_PROMPT = """You are an AI assistant specialized in writing professional and \
personalized email campaigns.
You will receive high-level instructions from the user about an email campaign to send to a \
list of clients.

Output MUST be valid JSON with exactly this structure:
{
  "subject": "string",
  "previewText": "string",
  "bodyHtml": "string",
  "bodyText": "string"
}

- subject: catchy subject line
- previewText: short preview line
- bodyHtml: HTML email body (<p>, <strong>, <ul>, etc.)
- bodyText: same content as plain text
Do NOT include backticks, markdown fences, or anything other than the JSON."""

CAMPAIGN_USER_PROMPT = """User instructions: {instructions}

Sample of recipients (up to {sample_cap}):
{recipients_json}

Mentioned client names: {mentioned_names_json}"""

GENERATION_ERROR_REPLY = """I encountered an error while generating the email campaign.

Details: {detail}"""

CHAT_ERROR_REPLY = """I encountered an error while responding. Please try again or check \
your API key.

Details: {detail}"""

NO_RECIPIENTS_REPLY = """Please select at least one client using the checkboxes, or clearly \
mention which client(s) you want (for example, "send an email to Tina Cheng") before asking \
me to draft a campaign."""

CAMPAIGN_READY_REPLY = """I generated an email campaign for the chosen recipients. You can \
review it in the preview panel."""
