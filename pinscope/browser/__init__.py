"""
Headless browser scraping for pinscope.

Provides:
- A lazily launched, shared Playwright Chromium instance
- The pin search routine (navigate, wait, scroll, extract)
- Data models for scraped images
"""
