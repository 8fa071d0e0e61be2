"""
Listing_Engine — AI product-copy engine for eCommerce listings.

Submodules:
    - config:     Settings (.env) + option catalogs
    - core:       Data model, error taxonomy, debug log sink
    - saas_core:  LLM provider registry + AI Gateway
    - connectors: Live page fetcher
    - processors: Extraction, copywriter (generation), export formatters
    - session:    Session context + Reconciliation Controller
    - dashboard:  Streamlit UI pages
"""
