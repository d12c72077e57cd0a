"""Pure typing analytics: verse stats, labels and time buckets."""
