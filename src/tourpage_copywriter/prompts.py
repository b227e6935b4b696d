"""
Prompt templates for website copy generation.

Builds the system instructions and user message sent to the model, for both
input modes: a parsed content template (CSV/Excel) and free-form text.
"""

import json
from typing import NamedTuple, Optional

from .config import GenerationConfig
from .schema import ContentTree


class PromptPair(NamedTuple):
    """System instructions and user content for one model request."""
    system: str
    user: str


# Output contract shown to the model. Keys must match schema.ContentTree.
OUTPUT_FORMAT = """{
  "hero": { "title": "", "description": "", "ctaButtonText": "", "ctaButtonLink": "", "title_zh": "", "description_zh": "", "ctaButtonText_zh": "" },
  "about": { "badge": "", "title": "", "description": "", "image": "", "badge_zh": "", "title_zh": "", "description_zh": "" },
  "solutions": [ { "badge": "", "title": "", "description": "", "badge_zh": "", "title_zh": "", "description_zh": "" } ],
  "products": [ { "title": "", "shortDescription": "", "completeDescription": "", "title_zh": "", "shortDescription_zh": "", "completeDescription_zh": "" } ],
  "contact": { "badge": "", "title": "", "description": "", "badge_zh": "", "title_zh": "", "description_zh": "" },

  "seo": {
    "metaDescription": "SEO-optimized site description",
    "metaKeywords": "keyword1,keyword2,keyword3",
    "ogTitle": "Social sharing title",
    "ogDescription": "Social sharing description",
    "ogType": "website",

    "h2Suggestions": ["Suggested H2 heading 1", "Suggested H2 heading 2"],
    "h3Suggestions": ["Suggested H3 heading 1", "Suggested H3 heading 2"],

    "primaryKeywords": ["core keyword 1", "core keyword 2"],
    "longTailKeywords": ["long-tail phrase 1", "long-tail phrase 2"],
    "keywordDensity": [
      {"keyword": "keyword", "density": 3.2, "recommendation": "Density is appropriate, keep it"}
    ],

    "competitorAnalysis": {
      "industry": "Industry category",
      "competitorKeywords": ["keywords competitors rank for"],
      "gapAnalysis": "Market opportunity analysis",
      "recommendations": "Competitive strategy recommendations"
    },

    "uspAnalysis": {
      "uniqueSellingPoints": ["USP 1", "USP 2"],
      "differentiationStrategy": "Differentiation strategy",
      "positioningStatement": "Brand positioning statement"
    },

    "contentOptimization": {
      "titleLength": { "current": 45, "recommended": "Keep titles within 50-60 characters" },
      "descriptionLength": { "current": 120, "recommended": "Keep descriptions at 150-160 characters" },
      "readabilityScore": { "score": 85, "suggestions": "Readable; add more calls to action" }
    }
  },

  "structuredData": {
    "organization": {
      "type": "Organization",
      "name": "Company name",
      "description": "Company description",
      "url": "https://example.com",
      "contactPoint": { "telephone": "+886-xxx-xxxx", "contactType": "customer service" }
    },
    "products": [
      { "type": "Product", "name": "Product name", "description": "Product description", "brand": "Brand", "category": "Category" }
    ],
    "website": {
      "type": "WebSite",
      "url": "https://example.com",
      "name": "Site name",
      "description": "Site description"
    }
  }
}"""


SYSTEM_PROMPT_TEMPLATE = """You are an international SEO expert and digital marketing consultant with 15 years of experience in search engine optimization, content marketing, competitive analysis and multilingual website strategy.

Your task is to turn the client's {source_description} and marketing parameters into a complete, SEO-optimized website copy system.

CORE TASK:
Produce 1) website copy, 2) a complete SEO strategy and 3) structured data markup, so the site ranks as well as possible.

RULES - MUST FOLLOW:

1. SOURCE ANALYSIS:
   - {analysis_rule}
   - Identify core business value, competitive advantages and target customers
   - Extract key entities: company name, product names, service categories, locations

2. AUDIENCE-DRIVEN CONTENT:
   - B2B: professional terminology, ROI focus, solution-oriented long-tail keywords, authority
   - B2C: emotional connection, user experience, everyday scenarios, purchase-intent keywords

3. MULTILINGUAL LOCALIZATION:
   - Copy in the target language must follow local search habits and culture
   - Keyword placement must match local search intent
   - BILINGUAL OUTPUT:
     - Non-Chinese markets: target-language copy plus a Chinese translation in every _zh field
     - Chinese markets: optimized Chinese copy only; leave _zh fields out

4. TECHNICAL SEO (REQUIRED):
   - Meta description: 120-160 characters including the core keywords
   - Meta keywords: 5-10 precise keywords
   - Open Graph tags for social sharing
   - Primary keywords: 3-5 competitive core terms
   - Long-tail keywords: 10-15 specific search phrases
   - Keyword density analysis: recommend an optimal density of 2-4%
   - H2/H3 heading suggestions with a semantic structure
   - Readability score with improvement suggestions

5. COMPETITIVE ANALYSIS (REQUIRED):
   - Analyze industry keyword trends
   - Identify competitive gaps
   - Recommend differentiated positioning and USP reinforcement

6. STRUCTURED DATA (Schema.org):
   - Organization: company entity
   - Products: product markup
   - WebSite: site search markup

7. OUTPUT FORMAT - return ONLY this JSON object, every section included
   (hero, about, solutions, products, contact, seo, structuredData):

{output_format}

REMINDERS:
- Keep keyword placement natural; no keyword stuffing
- Structured data must follow the Schema.org vocabulary
- Content must be original and valuable
- No markdown fences, comments or explanations around the JSON
"""

TEMPLATE_SOURCE = "existing website copy (parsed from their content template)"
TEMPLATE_ANALYSIS_RULE = (
    "Review the client's existing copy, find SEO opportunities and keep the brand's core "
    "values while improving search visibility"
)

TEXT_SOURCE = "company and product information"
TEXT_ANALYSIS_RULE = (
    "Analyze the company profile, product information and services the client describes"
)


def _parameter_lines(config: GenerationConfig) -> str:
    """Marketing parameters as a bullet list."""
    params = config.prompt_parameters()
    lines = [
        f"* Audience: {params['audience']}",
        f"* Target market language: {params['language']} ({config.language_name})",
        f"* Marketing focus: {params['focus']}",
        f"* Must mention: {params['keywords']}",
        f"* Industry: {params['industry_category']}",
        f"* Target location: {params['target_location']}",
        f"* Business type: {params['business_type']}",
        f"* SEO mode: {params['seo_mode']}",
        f"* Content length: {params['content_length']}",
    ]
    if params["competitor_urls"]:
        lines.append(f"* Competitor sites: {params['competitor_urls']}")
    return "\n".join(lines)


def build_system_prompt(from_template: bool) -> str:
    """System instructions for template input (True) or free-text input (False)."""
    return SYSTEM_PROMPT_TEMPLATE.format(
        source_description=TEMPLATE_SOURCE if from_template else TEXT_SOURCE,
        analysis_rule=TEMPLATE_ANALYSIS_RULE if from_template else TEXT_ANALYSIS_RULE,
        output_format=OUTPUT_FORMAT,
    )


def build_template_prompts(tree: ContentTree, config: GenerationConfig) -> PromptPair:
    """
    Build prompts from a parsed content template.

    Args:
        tree: Content Tree read from the client's template.
        config: Marketing and SEO parameters.

    Returns:
        PromptPair with system instructions and user content.
    """
    user = f"""Generate website copy from the following data and parameters.

**Step 1: Source data (JSON):**
```json
{json.dumps(tree, ensure_ascii=False, indent=2)}
```

**Step 2: Parameters:**
{_parameter_lines(config)}

Follow the OUTPUT FORMAT in the system instructions exactly and return only the JSON object.
"""
    return PromptPair(build_system_prompt(from_template=True), user)


def build_text_prompts(
    text: str,
    config: GenerationConfig,
    website_url: Optional[str] = None,
) -> PromptPair:
    """
    Build prompts from free-form company/product text.

    Args:
        text: Client-provided description.
        config: Marketing and SEO parameters.
        website_url: Optional site URL, prepended to the description.

    Returns:
        PromptPair with system instructions and user content.
    """
    content = text.strip()
    if website_url and website_url.strip():
        content = f"Website: {website_url.strip()}\n\n{content}"

    user = f"""Create complete professional website copy from the information below.

**Client information:**
{content}

**Marketing parameters:**
{_parameter_lines(config)}

Extract the key content, then write copy that fits the target market and audience,
is compelling and professional, and follows current SEO guidelines.
"""
    return PromptPair(build_system_prompt(from_template=False), user)
