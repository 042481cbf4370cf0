"""Content API: blog posts, contact submissions and email subscriptions."""
