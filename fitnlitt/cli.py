"""Flask CLI commands for admin operations."""
import click
from flask import current_app


def register_cli(app):
    @app.cli.command("init-db")
    def init_db():
        """Create all tables."""
        from fitnlitt.extensions import db

        db.create_all()
        click.echo("Database initialized.")

    @app.cli.command("seed-demo")
    def seed_demo():
        """Seed demo collections, products and variants (idempotent)."""
        from fitnlitt.extensions import db
        from fitnlitt.models.collection import Collection
        from fitnlitt.models.image import ProductImage
        from fitnlitt.models.product import Product
        from fitnlitt.models.variant import Variant

        # Only seed if no products exist yet
        if Product.query.first():
            click.echo("Products already exist, skipping demo seed.")
            return

        collections = {
            "tayt": Collection(slug="tayt", title="Tayt", description="Yüksek bel taytlar"),
            "sporcu-sutyeni": Collection(
                slug="sporcu-sutyeni", title="Sporcu Sütyeni", description="Destekli sporcu sütyenleri"
            ),
            "sort": Collection(slug="sort", title="Şort", description="Antrenman şortları"),
        }
        db.session.add_all(collections.values())
        db.session.flush()

        demo_products = [
            ("sculpt-tayt", "Sculpt Yüksek Bel Tayt", 899.90, 1099.90, "tayt", True,
             ["XS", "S", "M", "L", "XL"], ["Siyah", "Lacivert"]),
            ("flow-tayt", "Flow Dikişsiz Tayt", 749.90, None, "tayt", False,
             ["S", "M", "L"], ["Siyah", "Bordo"]),
            ("core-bra", "Core Sporcu Sütyeni", 549.90, 649.90, "sporcu-sutyeni", True,
             ["S", "M", "L"], ["Siyah", "Beyaz"]),
            ("air-bra", "Air Hafif Destek Sütyen", 459.90, None, "sporcu-sutyeni", False,
             ["XS", "S", "M"], ["Pudra"]),
            ("run-sort", "Run 2'si 1 Arada Şort", 629.90, None, "sort", False,
             ["M", "L", "XL", "XXL"], ["Siyah", "Gri"]),
        ]
        for slug, title, price, compare_at, coll, featured, sizes, colors in demo_products:
            product = Product(
                slug=slug,
                title=title,
                price=price,
                compare_at=compare_at,
                collection_id=collections[coll].id,
                is_featured=featured,
            )
            db.session.add(product)
            db.session.flush()
            for size in sizes:
                for color in colors:
                    db.session.add(
                        Variant(
                            product_id=product.id,
                            size=size,
                            color=color,
                            sku=f"{slug}-{size}-{color}".lower(),
                            stock=10,
                        )
                    )
            db.session.add(
                ProductImage(
                    product_id=product.id,
                    url=f"https://placehold.co/800x1000?text={slug}",
                    sort=0,
                )
            )
        db.session.commit()
        click.echo(f"Seeded {len(demo_products)} demo products.")

    @app.cli.command("feature-clothing")
    def feature_clothing():
        """Mark every product with a clothing-size variant as featured."""
        from fitnlitt.services.product_service import feature_clothing_products

        products = feature_clothing_products()
        click.echo(f"Updated {len(products)} products to is_featured=true")
        for product in products:
            click.echo(f" - {product.slug}: {product.title}")

    @app.cli.command("import-store")
    @click.option("--dry-run", is_flag=True, help="Preview only, no writes.")
    @click.option("--limit", type=int, default=None, help="Import the first N products.")
    @click.option("--skip-images", is_flag=True, help="Keep source image URLs.")
    @click.option(
        "--background-images",
        is_flag=True,
        help="Enqueue image mirroring on the RQ queue instead of uploading inline.",
    )
    @click.option("--store", "store_base", default=None, help="Store base URL.")
    def import_store(dry_run, limit, skip_images, background_images, store_base):
        """Import collections and products from a WooCommerce Store API."""
        from fitnlitt.services.import_service import StoreApiUnavailable, import_store

        base = (store_base or current_app.config["STORE_API_BASE"]).rstrip("/")
        click.echo(f"Source : {base}")
        click.echo(f"Bucket : {current_app.config['SUPABASE_STORAGE_BUCKET']}")
        if dry_run:
            click.echo("Mode   : DRY RUN (no writes)")
        if skip_images:
            click.echo("Images : skipped")
        if limit:
            click.echo(f"Limit  : {limit} products")

        try:
            stats = import_store(
                store_base=base,
                limit=limit,
                dry_run=dry_run,
                skip_images=skip_images,
                background_images=background_images,
            )
        except StoreApiUnavailable as e:
            click.echo(f"Store API unavailable: GET {e.url} returned {e.status}", err=True)
            click.echo(
                "Check that WooCommerce is installed, the Store API is enabled and "
                "no WAF blocks /wp-json/* routes:\n"
                f"  curl -I \"{base}/wp-json/wc/store/v1/products\"",
                err=True,
            )
            raise SystemExit(1)

        click.echo(
            f"Done: {stats['imported']} imported, {stats['failed']} failed, "
            f"{stats['collections']} collections"
        )
        if dry_run:
            click.echo("(Dry run: no data was written)")

    @app.cli.command("stats")
    def stats():
        """Show product statistics."""
        from fitnlitt.services.product_service import get_stats

        s = get_stats()
        total = s.get("active", 0) + s.get("inactive", 0)
        click.echo(f"Total products: {total}")
        for key, count in sorted(s.items()):
            click.echo(f"  {key}: {count}")
