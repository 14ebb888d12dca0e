"""
Example of building sketches from file streams with tiny-sketch.

This example writes two small log files, then:
- counts one key with a plain filter/count pipeline,
- builds a Count-Min Sketch and a Bloom filter over every line,
- merges two sketches built from separate files.
"""

import os
import tempfile

from tiny_sketch import (
    Stream,
    bloom_filter_collector_from_capacity,
    count_min_collector,
    enable_console_logging,
    file_line_stream,
)


def write_sample_files(directory):
    """Write two small event logs and return their paths."""
    contents = {
        "events-1.log": "apple\nbanana\napple\n",
        "events-2.log": "orange\napple\nbanana\n",
    }
    paths = []
    for name, text in contents.items():
        path = os.path.join(directory, name)
        with open(path, "w", encoding="utf-8") as f:
            f.write(text)
        paths.append(path)
    return paths


def demonstrate_pipeline(paths):
    """Filter a file stream and count the matches."""
    print("\n=== Files -> filter -> count ===")

    source = file_line_stream(paths)
    apple_count = Stream(source).filter(lambda line: line == "apple").count()
    if source.error is not None:
        raise source.error

    print(f"apple count={apple_count}")


def demonstrate_sketches(paths):
    """Build a frequency sketch and a membership filter from the same files."""
    print("\n=== Files -> sketches ===")

    source = file_line_stream(paths)

    cms = count_min_collector(width=512, depth=6, key_fn=str).collect(source)
    if source.error is not None:
        raise source.error

    bloom = bloom_filter_collector_from_capacity(
        expected_items=100, false_positive_rate=0.01, key_fn=str
    ).collect(source)
    if source.error is not None:
        raise source.error

    for fruit in ("apple", "banana", "orange", "kiwi"):
        print(
            f"  {fruit:<7} estimate={cms.estimate_frequency(fruit)} "
            f"maybe_seen={bloom.contains(fruit)}"
        )
    print(f"total_count={cms.total_count} bloom={bloom!r}")


def demonstrate_merge(paths):
    """Sketch each file separately, then merge the results."""
    print("\n=== Per-file sketches -> merge ===")

    collector = count_min_collector(width=256, depth=5, key_fn=str)
    sketches = []
    for path in paths:
        source = file_line_stream([path])
        sketches.append(collector.collect(source))
        if source.error is not None:
            raise source.error

    merged = sketches[0]
    for sketch in sketches[1:]:
        merged.merge(sketch)

    print(f"merged total_count={merged.total_count}")
    print(f"merged apple estimate={merged.estimate_frequency('apple')}")


if __name__ == "__main__":
    enable_console_logging(level="INFO")

    with tempfile.TemporaryDirectory() as directory:
        sample_paths = write_sample_files(directory)
        demonstrate_pipeline(sample_paths)
        demonstrate_sketches(sample_paths)
        demonstrate_merge(sample_paths)
