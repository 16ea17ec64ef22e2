"""Prompt templates for section generation."""

# =============================================================================
# System prompts
# =============================================================================

SECTION_SYSTEM_PROMPT = """You are an expert Shopify Liquid template developer. Generate complete, production-ready Shopify sections based on the user's prompt. Include all necessary schema settings, styles, and responsive design. The code should be well-commented and follow Shopify best practices.

OUTPUT RULES:
1. Each section must end with exactly one {% schema %} ... {% endschema %} block containing valid JSON with "name", "settings" and "presets".
2. When the user asks for several sections, output them one after another; do not merge them.
3. Output Liquid code only, without explanations."""

BASE_TEMPLATE_PROMPT = """You are an expert Shopify Liquid template developer. Generate a complete Shopify section based on the user's prompt. Use this base template as a starting point and modify it according to the user's requirements:

{base_template}

Generate a complete, production-ready Shopify Liquid section file. Include all necessary schema settings, styles, and responsive design. The code should be well-commented and follow Shopify best practices. End the section with exactly one {{% schema %}} ... {{% endschema %}} block containing valid JSON."""


def build_system_prompt(base_template: str | None = None) -> str:
    """Return the system prompt, embedding a base template when given."""
    if base_template and base_template.strip():
        return BASE_TEMPLATE_PROMPT.format(base_template=base_template.strip())
    return SECTION_SYSTEM_PROMPT


def build_user_prompt(prompt: str, max_results: int = 1) -> str:
    """Return the user prompt, asking for several sections when requested."""
    prompt = prompt.strip()
    if max_results > 1:
        return f"{prompt}\n\nGenerate up to {max_results} separate sections."
    return prompt
