"""
Extraction prompts — structured-data-first product parsing.

Placeholders use __KEY__ tokens filled with str.replace(), so literal braces
in the JSON examples never collide with formatting.
"""

HTML_PARSE_PROMPT = """\
You are an expert HTML data parser. You will be given the raw HTML of a product page. Your task is to extract product information from it.

**Extraction Strategy (Chain of Thought):**

1.  **Primary Method (Structured Data):**
    - Your **first priority** is to find a `<script type="application/ld+json">` tag in the provided HTML.
    - If you find it, parse its content. Look for the object with `"@type": "Product"`.
    - Extract the 'name' (for title), 'description', 'image' and 'offers.price' directly from this JSON-LD object. This is the most reliable source.

2.  **Secondary Method (Fallback):**
    - **If and only if** you cannot find a valid JSON-LD Product script, fall back to analyzing the rest of the HTML.
    - **Image:** Look for the `<meta property="og:image" content="...">` tag in the `<head>`.
    - **Title:** Find the main `<h1>` tag.
    - **Description & Features:** Find the main content blocks related to the title.
    - **Reviews:** If you find a customer reviews section, extract a few representative snippets (up to 5).

3.  **Final Output:**
    - Determine the page's primary language ('en', 'he', etc.).
    - Make the image URL absolute (page URL: __SOURCE_URL__).
    - Format the final data as a JSON object with the keys: title, description, features (array), reviews (array), image, price, language.

--- HTML CONTENT TO PARSE ---
__CONTENT__
"""

TEXT_PARSE_PROMPT = """\
You are an expert data extractor. Your task is to extract product information from the following plain text.

**Instructions:**
1. Read the text and identify the main product's title, description, and key features.
2. If customer reviews are present, extract a few representative snippets.
3. If a price is mentioned, extract it.
4. Determine the primary language of the text (e.g., 'en', 'he').
5. The image URL is unknown and should be an empty string.

Format the result as a JSON object with the keys: title, description, features (array), reviews (array), image, price, language.

--- TEXT CONTENT TO PARSE ---
__CONTENT__
"""


def hydrate(template: str, **variables) -> str:
    """Safe token replacement using __KEY__ syntax — avoids .format() KeyErrors."""
    result = template
    for key, val in variables.items():
        result = result.replace(f"__{key.upper()}__", str(val))
    return result
