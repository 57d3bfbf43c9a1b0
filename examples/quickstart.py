"""petrify Quickstart Example.

Demonstrates basic usage:
- Model and table definitions with nested, list and ref fields
- Wire serialization and polymorphic deserialization
- Copy-on-write updates
- Row conversion and MessagePack row batches

Usage:
    python examples/quickstart.py
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from petrify import (
    DateTime,
    Id,
    Integer,
    ListOf,
    Model,
    Nested,
    Object,
    Ref,
    SchemaRegistry,
    String,
    Table,
    create_adapter,
    decode_rows,
    deserialize,
    encode_rows,
    serialize,
)


# =============================================================================
# Model Definitions
# =============================================================================

class Author(Model):
    """Author embedded in posts."""

    id = Id()
    name = String()


class Post(Table):
    """Post stored in the posts table."""

    id = Id()
    title = String()
    author = Nested(Author)
    author_name = Ref("author.name")
    tags = ListOf(String())
    published_at = DateTime(serialized_name="publishedAt", column_name="published")
    extra = Object(default_factory=dict)

    class Meta:
        table_name = "posts"


class PostCard(Model):
    """Compact view of a post."""

    id = Id()
    title = String()


class AttachmentFields(Table):
    id = Id()
    kind = String()
    post_id = Integer()

    class Meta:
        abstract = True


class Image(AttachmentFields):
    width = Integer()
    height = Integer()

    class Meta:
        table_name = "attachments"


class Link(AttachmentFields):
    url = String()

    class Meta:
        table_name = "attachments"


class Attachment(AttachmentFields):
    class Meta:
        table_name = "attachments"
        polymorphic_on = "kind"
        polymorphic_map = {"image": Image, "link": Link}


# =============================================================================
# Main Demo
# =============================================================================

def main() -> None:
    logging.basicConfig(level=logging.INFO)

    print("=" * 60)
    print("petrify Quickstart")
    print("=" * 60)

    # ---------------------------------------------------------------------
    # CREATE
    # ---------------------------------------------------------------------
    print("\n1. Creating records...")

    tags = ["algorithms"]
    post = Post(
        id=1,
        title="Introduction to Algorithms",
        author=Author(id=7, name="Ada Lovelace"),
        tags=tags,
        published_at=datetime(2024, 3, 9, 12, 0, tzinfo=timezone.utc),
    )
    tags.append("ignored")
    print(f"   Created post: {post.title} by {post.author_name}")
    print(f"   Tags stay frozen: {post.tags}")

    # ---------------------------------------------------------------------
    # WIRE
    # ---------------------------------------------------------------------
    print("\n2. Wire objects...")

    wire = serialize(post)
    print(f"   Serialized: {wire}")
    print(f"   Round trip equal: {deserialize(Post, wire) == post}")

    attachment = deserialize(Attachment, {"id": 3, "kind": "link", "url": "https://example.com"})
    print(f"   Polymorphic: {type(attachment).__name__} -> {attachment.url}")

    # ---------------------------------------------------------------------
    # UPDATE
    # ---------------------------------------------------------------------
    print("\n3. Copy-on-write updates...")

    renamed = post.clone(title="Algorithms, Revised")
    print(f"   Original: {post.title}")
    print(f"   Clone:    {renamed.title}")

    card = create_adapter(Post, PostCard)(renamed)
    print(f"   Adapted: {card}")

    # ---------------------------------------------------------------------
    # ROWS
    # ---------------------------------------------------------------------
    print("\n4. Rows...")

    print(f"   Row: {post.to_row()}")
    payload = encode_rows([post, renamed])
    print(f"   Packed {len(payload)} bytes")
    print(f"   Decoded titles: {[p.title for p in decode_rows(Post, payload)]}")

    attachments = Attachment.from_rows(
        [
            {"id": 1, "kind": "image", "post_id": 1, "width": 640, "height": 480},
            {"id": 2, "kind": "link", "post_id": 1, "url": "https://example.com"},
            {"id": 3, "kind": "video", "post_id": 1},
        ]
    )
    print(f"   Attachment types: {[type(a).__name__ for a in attachments]}")

    # ---------------------------------------------------------------------
    # REGISTRY
    # ---------------------------------------------------------------------
    print("\n5. Registry...")

    registry = SchemaRegistry.from_module(__name__)
    print(f"   Tables: {[t.get_table_name() for t in registry.tables()]}")

    print("\n" + "=" * 60)
    print("Done!")
    print("=" * 60)


if __name__ == "__main__":
    main()
