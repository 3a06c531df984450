#!/usr/bin/env python3
"""
chapterdeck — Build standalone chapter slide decks and publish them to S3.

Each chapter lives in chapters/<name>/ (landing page, stylesheet, slides/*.html).
Building produces build/<name>_standalone.html; uploading records the public
URL per chapter in chapter-mappings.json.

Quick start:
  1. Add AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY and S3_BUCKET_NAME to .env
  2. python chapterdeck.py build 06-app-vector-algebra
  3. python chapterdeck.py deploy 06-app-vector-algebra
"""

import argparse
import sys
from pathlib import Path

from dotenv import find_dotenv, load_dotenv


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build chapter slide decks and upload them to S3",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Build one chapter into build/:
  python chapterdeck.py build 06-app-vector-algebra

  # Upload a directory without randomized file names:
  python chapterdeck.py upload ./build my-bucket html/CHAPTER_SUMMARY --no-uuid

  # Build and publish using S3_BUCKET_NAME / S3_PATH_PREFIX from .env:
  python chapterdeck.py deploy 06-app-vector-algebra

  # Publish an existing build without rebuilding:
  python chapterdeck.py deploy 06-app-vector-algebra --push-only
        """,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Assemble a chapter into one standalone HTML file")
    build.add_argument("chapter", help="Chapter name, e.g. 06-app-vector-algebra")

    upload = sub.add_parser("upload", help="Upload a file or directory to S3")
    upload.add_argument("source", type=Path, help="File or directory to upload")
    upload.add_argument("bucket", help="S3 bucket name")
    upload.add_argument("prefix", nargs="?", default="", help="Optional S3 key prefix (subfolder)")
    upload.add_argument(
        "--no-uuid", action="store_true", default=False,
        help="Keep original file names instead of appending a random UUID",
    )

    deploy = sub.add_parser("deploy", help="Build a chapter and upload it")
    deploy.add_argument("chapter", help="Chapter name, e.g. 06-app-vector-algebra")
    deploy.add_argument(
        "-p", "--push-only", action="store_true", default=False,
        help="Skip the build step, only push to S3",
    )

    for p in (build, deploy):
        p.add_argument(
            "--chapters-dir", type=Path, default=Path("chapters"), metavar="DIR",
            help="Directory holding chapter folders (default: ./chapters)",
        )
        p.add_argument(
            "--build-dir", type=Path, default=Path("build"), metavar="DIR",
            help="Where standalone HTML is written (default: ./build)",
        )
    for p in (upload, deploy):
        p.add_argument(
            "--mappings", type=Path, default=None, metavar="FILE",
            help="Chapter mapping file (default: CHAPTER_MAPPINGS_FILE or ./chapter-mappings.json)",
        )
    return parser.parse_args(argv)


def run(
    source: Path,
    bucket: str,
    prefix: str = "",
    randomize: bool = True,
    storage=None,
    config=None,
) -> int:
    """Upload source (file or directory). Returns a process exit code."""
    from storage import create_storage, load_storage_config
    from uploader import Uploader

    config = config or load_storage_config()
    source = Path(source)

    if storage is None:
        missing = config.missing_credentials()
        if missing:
            print("ERROR: AWS credentials not found.")
            print(f"Set {' and '.join(missing)} in the environment or .env")
            return 1
    if not bucket:
        print("ERROR: bucket name is required.")
        return 1
    if not source.exists():
        print(f"ERROR: source path does not exist: {source}")
        return 1

    print("Starting upload to S3...")
    print(f"  Source: {source}")
    print(f"  Bucket: {bucket}")
    print(f"  Prefix: {prefix or '(none)'}")
    print(f"  UUID filenames: {'enabled' if randomize else 'disabled'}")
    print()

    uploader = Uploader(
        storage or create_storage(config),
        mappings_path=config.mappings_path,
        randomize=randomize,
    )
    results = uploader.upload_path(source, bucket, prefix)

    succeeded = [r for r in results if r.success]
    failed = len(results) - len(succeeded)
    print()
    print("=" * 50)
    print(f"Upload complete! {len(succeeded)} file(s) uploaded" + (f", {failed} failed" if failed else ""))
    print("=" * 50)

    return 0 if succeeded else 1


def cmd_build(args) -> int:
    from slides import SlideAssemblyError, build_chapter

    try:
        build_chapter(args.chapter, args.chapters_dir, args.build_dir)
    except SlideAssemblyError as e:
        print(f"ERROR: {e}")
        return 1
    print("Build successful!")
    return 0


def cmd_deploy(args, config) -> int:
    from registry import derive_chapter_key, lookup_url
    from slides import output_path_for

    missing = config.missing_credentials()
    if missing:
        print("ERROR: AWS credentials not found.")
        print(f"Set {' and '.join(missing)} in .env")
        return 1
    if not config.bucket:
        print("ERROR: S3_BUCKET_NAME not set.")
        print("Add it to .env:  S3_BUCKET_NAME=your-bucket")
        return 1
    if not (args.chapters_dir / args.chapter).is_dir():
        print(f"ERROR: chapter '{args.chapters_dir / args.chapter}' not found")
        return 1

    print("=" * 50)
    print(f"Chapter:   {args.chapter}")
    print(f"S3 Bucket: {config.bucket}")
    print(f"S3 Prefix: {config.prefix}")
    print("=" * 50)

    if args.push_only:
        print("Skipping build (push-only mode)")
    elif cmd_build(args) != 0:
        print("Build failed!")
        return 1

    build_file = output_path_for(args.chapter, args.build_dir)
    if not build_file.is_file():
        print(f"ERROR: build file not found: {build_file}")
        return 1

    if run(build_file, config.bucket, config.prefix, config=config) != 0:
        print("Upload failed!")
        return 1

    url = lookup_url(config.mappings_path, derive_chapter_key(build_file.name))
    if url:
        print("=" * 50)
        print("Chapter URL:")
        print(url)
        print("=" * 50)
    print("All done!")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    # .env is looked up from the working directory, not from where this file lives
    load_dotenv(find_dotenv(usecwd=True))

    if args.command == "build":
        return cmd_build(args)

    from storage import load_storage_config

    config = load_storage_config()
    if args.mappings is not None:
        config.mappings_path = args.mappings

    if args.command == "upload":
        return run(args.source, args.bucket, args.prefix, randomize=not args.no_uuid, config=config)
    return cmd_deploy(args, config)


if __name__ == "__main__":
    sys.exit(main())
