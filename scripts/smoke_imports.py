from site_rag.chunking import chunk_text
from site_rag.extraction import extract_article
from site_rag.links import extract_links
from site_rag.schema import Page


if __name__ == "__main__":
    html = (
        "<!doctype html><html><head><title>Smoke</title></head><body>"
        "<p>Hello from the smoke test page.</p><a href='/next'>next</a>"
        "<footer>Call us: (555) 123-4567</footer></body></html>"
    )
    page = Page(url="https://example.com/", html=html)
    article = extract_article(page)
    print(
        {
            "links": extract_links(html, page.url),
            "title": article.title if article else None,
            "chunks": len(chunk_text(article.text)) if article else 0,
        }
    )
