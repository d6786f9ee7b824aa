import math
import re
from typing import List, Optional
from .constants import MAX_REVIEW_ASPECTS, MAX_SAMPLE_REVIEWS, MAX_THUMBNAILS, SUPPORTED_COUNTRIES
from .models import Product, ProductDetails, SearchStats
from .session import SearchSession

def render_stars(rating: Optional[float]) -> str:
    """Render a 0-5 rating as full, half and empty stars."""
    if rating is None:
        return ""
    rating = max(0.0, min(5.0, rating))
    full = math.floor(rating)
    half = 1 if rating % 1 != 0 else 0
    empty = 5 - math.ceil(rating)
    return "★" * full + "½" * half + "☆" * empty

def star_percentage(star_count: str, total_reviews: str) -> float:
    """Share of reviews with a given star count, from comma-formatted count strings."""
    try:
        count = int(str(star_count).replace(",", ""))
        total = int(str(total_reviews).replace(",", ""))
    except ValueError:
        return 0.0
    if total <= 0:
        return 0.0
    return count / total * 100

def format_price(price: str) -> str:
    return re.sub(r"[^0-9.]", "", price or "")

def format_stats(stats: Optional[SearchStats]) -> str:
    if not stats:
        return ""
    lines = [
        "\nSearch Results Summary:",
        f"  Total Products: {stats.total_products}",
        f"  Vendors:        {stats.unique_sources}",
        f"  Price Range:    {stats.price_range or 'N/A'}",
        f"  Avg Price:      {'$' + stats.avg_price if stats.avg_price else 'N/A'}",
        f"  Avg Rating:     {stats.avg_rating + '★' if stats.avg_rating else 'N/A'}",
    ]
    return "\n".join(lines)

def format_product_line(index: int, product: Product) -> str:
    rating = ""
    if product.rating is not None:
        count = f" ({product.rating_count:,})" if product.rating_count else ""
        rating = f"  {render_stars(product.rating)} {product.rating:.1f}{count}"
    return f"{index:>3}. {product.title}\n     {product.price} @ {product.source}{rating}\n     {product.link}"

def format_display_results(session: SearchSession) -> str:
    """Formats the filtered, sorted results of a session for display."""
    message = session.empty_message()
    if message:
        return f"\n{message}"

    visible = session.visible_products
    output_lines = [f"\n{session.results_heading()}:"]
    labels = session.active_filter_labels()
    if labels:
        output_lines.append("Active filters: " + " | ".join(labels))
    for i, product in enumerate(visible, 1):
        output_lines.append(format_product_line(i, product))
    return "\n".join(output_lines)

def format_countries() -> str:
    return ", ".join(f"{code} ({flag} {label})" for code, (label, flag) in SUPPORTED_COUNTRIES.items())

def format_product_details(details: ProductDetails) -> str:
    """Formats a product detail record: overview, sellers, rating breakdown and reviews."""
    reviews = details.reviews
    lines = ["", details.title, "=" * min(len(details.title), 80)]
    if details.description:
        lines.append(details.description)

    lines.append(f"\nRating: {render_stars(reviews.overall_rating)} {reviews.overall_rating:.1f} ({reviews.total_reviews} reviews)")
    for stars, count in reviews.star_distribution.as_pairs():
        pct = star_percentage(count, reviews.total_reviews)
        bar = "#" * int(round(pct / 5))
        lines.append(f"  {stars}★ {bar:<20} {pct:5.1f}% ({count})")

    sellers = details.buying_options.sellers
    lines.append(f"\nAvailable from {len(sellers)} sellers:")
    for seller in sellers:
        extras = [x for x in (seller.condition, seller.shipping) if x]
        suffix = f" ({', '.join(extras)})" if extras else ""
        lines.append(f"  - {seller.seller_name}: ${format_price(seller.total_price) or format_price(seller.item_price)}{suffix}")
        if seller.seller_url:
            lines.append(f"    {seller.seller_url}")

    aspects = reviews.aspects[:MAX_REVIEW_ASPECTS]
    if aspects:
        lines.append("\nWhat people mention:")
        for aspect in aspects:
            sign = "+" if aspect.sentiment == "positive" else "-"
            lines.append(f"  {sign} {aspect.aspect}: {aspect.mention_count} mentions, {aspect.sentiment_percentage:.0f}% {aspect.sentiment}")

    samples = reviews.sample_reviews[:MAX_SAMPLE_REVIEWS]
    if samples:
        lines.append("\nCustomer Reviews:")
        for review in samples:
            lines.append(f"  {render_stars(review.rating)} {review.reviewer} ({review.source}, {review.date})")
            lines.append(f"    {review.text}")

    thumbnails = details.images.thumbnails[:MAX_THUMBNAILS]
    main_images = details.images.main_images
    if main_images or thumbnails:
        lines.append(f"\nImages: {len(main_images)} main, {len(thumbnails)} thumbnails")
        for image in (main_images or thumbnails)[:1]:
            lines.append(f"  {image.url}")
    return "\n".join(lines)

def format_summary_hint() -> List[str]:
    return [
        "\nYou can refine the results with:",
        "- filter min=10 max=250 rating=4 sources=\"Best Buy,Walmart\"",
        "- sort price-low | price-high | rating | position",
        "- clear (reset all filters)",
        "- country <code> (search again in another country)",
        "- details <n> (show sellers and reviews for result n)",
        "- new (start a new search)",
    ]
