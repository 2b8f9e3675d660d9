"""Document Extraction Example.

This example demonstrates text extraction from the three input kinds:
- a file path
- an in-memory byte buffer (with and without hints)
- a file: URI

Run from the project root after `pip install -e .`.
"""

import tempfile
from pathlib import Path

from text_extraction import TextExtractionError, TextExtractor


def main():
    extractor = TextExtractor()

    print("=" * 60)
    print("Document Extraction Examples")
    print("=" * 60 + "\n")

    sample_dir = Path(tempfile.mkdtemp(prefix="text_extraction_"))

    # 1. File path
    print("1. File Path:")
    print("-" * 60)
    txt_file = sample_dir / "sample.txt"
    txt_file.write_text("This is a sample text file.\nIt contains multiple lines.\n")
    result = extractor.extract_file(txt_file)
    print(f"Content-Type: {result.content_type}")
    print(f"Extracted: {result.text}")

    # 2. Bytes, sniffed
    print("2. Byte Buffer (sniffed):")
    print("-" * 60)
    html = b"<html><head><title>Hello</title></head><body><p>Sniffed HTML</p></body></html>"
    result = extractor.extract_bytes(html)
    print(f"Content-Type: {result.content_type}")
    print(f"Metadata: {dict(result.metadata)}\n")

    # 3. Bytes with an explicit hint: no sniffing
    print("3. Byte Buffer (hinted):")
    print("-" * 60)
    result = extractor.extract_bytes(b"a,b\n1,2\n", "table.csv", "text/csv")
    print(f"Content-Type: {result.content_type}\n")

    # 4. URI
    print("4. URI:")
    print("-" * 60)
    result = extractor.extract_uri(txt_file.as_uri())
    print(f"Uri: {result.metadata['Uri']}\n")

    # 5. Failures are wrapped
    print("5. Missing File:")
    print("-" * 60)
    try:
        extractor.extract_file(sample_dir / "missing.pdf")
    except TextExtractionError as e:
        print(f"Error: {e}\n")

    # 6. OCR
    print("6. OCR:")
    print("-" * 60)
    print("Point the extractor at a Tesseract binary to OCR images and scanned PDFs:")
    print("  extractor.tesseract_path = '/usr/bin/tesseract'")
    print("  extractor.ocr_enabled = False  # turn it off again\n")


if __name__ == "__main__":
    main()
