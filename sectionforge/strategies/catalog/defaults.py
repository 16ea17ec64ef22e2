"""Built-in catalog used when the section directory cannot be read."""

from sectionforge.interfaces.catalog import Template, VariableDefinition

_HERO_BODY = """{% comment %}
  Section: {{title}}
  Description: {{description}}
{% endcomment %}

<div class="hero-section" style="background-color: {{bg_color}}; padding: 80px 20px; text-align: center;">
  <h1 style="color: {{text_color}}; font-size: 48px; margin-bottom: 20px;">{{heading}}</h1>
  <p style="color: {{text_color}}; font-size: 20px; margin-bottom: 30px;">{{subheading}}</p>
  <a href="{{cta_url}}" class="cta-button" style="background-color: {{button_color}}; color: white; padding: 15px 30px; text-decoration: none; border-radius: 5px; display: inline-block;">
    {{cta_text}}
  </a>
</div>"""

_PRODUCT_CAROUSEL_BODY = """{% comment %}
  Section: {{title}}
  Description: {{description}}
{% endcomment %}

<div class="product-carousel" style="padding: 60px 20px; background-color: {{bg_color}};">
  <h2 style="text-align: center; color: {{heading_color}}; font-size: 36px; margin-bottom: 40px;">{{heading}}</h2>
  <div class="products-grid" style="display: grid; grid-template-columns: repeat(auto-fit, minmax(250px, 1fr)); gap: 30px; max-width: 1200px; margin: 0 auto;">
    {% for product in collections.{{collection_handle}}.products limit: {{product_limit}} %}
      <div class="product-card" style="background: white; border-radius: 8px; overflow: hidden;">
        <a href="{{ product.url }}">
          <img src="{{ product.featured_image | img_url: '400x400' }}" alt="{{ product.title }}" style="width: 100%; height: 250px; object-fit: cover;">
          <div style="padding: 20px;">
            <h3 style="margin: 0 0 10px 0; color: {{text_color}};">{{ product.title }}</h3>
            <p style="color: {{price_color}}; font-size: 20px; font-weight: bold; margin: 0;">{{ product.price | money }}</p>
          </div>
        </a>
      </div>
    {% endfor %}
  </div>
</div>"""

_FAQ_BODY = """{% comment %}
  Section: {{title}}
  Description: {{description}}
{% endcomment %}

<div class="faq-section" style="padding: 60px 20px; background-color: {{bg_color}}; max-width: 800px; margin: 0 auto;">
  <h2 style="text-align: center; color: {{heading_color}}; font-size: 36px; margin-bottom: 40px;">{{heading}}</h2>
  <div class="faq-items">
    {% for i in (1..{{faq_count}}) %}
      <div class="faq-item" style="margin-bottom: 15px; border: 1px solid {{border_color}}; border-radius: 8px;">
        <div class="faq-question" style="padding: 20px; cursor: pointer; color: {{question_color}}; font-weight: bold;">
          Question {{ i }}
        </div>
        <div class="faq-answer" style="padding: 20px; color: {{answer_color}}; display: none;">
          Answer {{ i }} - Edit this in your theme editor
        </div>
      </div>
    {% endfor %}
  </div>
</div>

<script>
  document.querySelectorAll('.faq-question').forEach(question => {
    question.addEventListener('click', function() {
      const answer = this.nextElementSibling;
      answer.style.display = answer.style.display === 'none' ? 'block' : 'none';
    });
  });
</script>"""


def _var(type_: str, default: str, label: str, description: str) -> VariableDefinition:
    return VariableDefinition(type=type_, default=default, label=label, description=description)


def get_default_templates() -> list[Template]:
    """Return the built-in fallback catalog (never empty)."""
    return [
        Template(
            id="hero-1",
            name="Hero Banner",
            description="A beautiful hero section with heading, subheading, and CTA button",
            tags=("hero", "banner", "cta"),
            category="hero",
            body=_HERO_BODY,
            variables={
                "title": _var("text", "Hero Section", "Section Title", "Internal title for this section"),
                "description": _var("textarea", "Hero banner section", "Description", "Section description"),
                "heading": _var("text", "Welcome to Our Store", "Heading", "Main heading text"),
                "subheading": _var("textarea", "Discover amazing products", "Subheading", "Subheading text"),
                "cta_text": _var("text", "Shop Now", "Button Text", "Call-to-action button text"),
                "cta_url": _var("text", "/collections/all", "Button URL", "Link for the CTA button"),
                "bg_color": _var("color", "#667eea", "Background Color", "Background color"),
                "text_color": _var("color", "#ffffff", "Text Color", "Text color"),
                "button_color": _var("color", "#f5576c", "Button Color", "Button background color"),
            },
        ),
        Template(
            id="product-carousel-1",
            name="Product Carousel",
            description="A responsive product carousel showcasing featured products",
            tags=("products", "carousel", "featured"),
            category="product",
            body=_PRODUCT_CAROUSEL_BODY,
            variables={
                "title": _var("text", "Product Carousel", "Section Title", "Internal title"),
                "description": _var("textarea", "Featured products carousel", "Description", "Section description"),
                "heading": _var("text", "Featured Products", "Heading", "Section heading"),
                "collection_handle": _var("text", "all", "Collection Handle", "Shopify collection handle"),
                "product_limit": _var("text", "8", "Product Limit", "Number of products to show"),
                "bg_color": _var("color", "#f8f9fa", "Background Color", "Section background"),
                "heading_color": _var("color", "#333333", "Heading Color", "Heading text color"),
                "text_color": _var("color", "#333333", "Text Color", "Product title color"),
                "price_color": _var("color", "#667eea", "Price Color", "Price text color"),
            },
        ),
        Template(
            id="faq-1",
            name="FAQ Accordion",
            description="A collapsible FAQ section with questions and answers",
            tags=("faq", "accordion", "questions"),
            category="faq",
            body=_FAQ_BODY,
            variables={
                "title": _var("text", "FAQ Section", "Section Title", "Internal title"),
                "description": _var("textarea", "Frequently asked questions", "Description", "Section description"),
                "heading": _var("text", "Frequently Asked Questions", "Heading", "Section heading"),
                "faq_count": _var("text", "5", "Number of FAQs", "How many FAQ items to show"),
                "bg_color": _var("color", "#ffffff", "Background Color", "Section background"),
                "heading_color": _var("color", "#333333", "Heading Color", "Heading text color"),
                "border_color": _var("color", "#e0e0e0", "Border Color", "Border color"),
                "question_color": _var("color", "#333333", "Question Color", "Question text color"),
                "answer_color": _var("color", "#666666", "Answer Color", "Answer text color"),
            },
        ),
    ]
