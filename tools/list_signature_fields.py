"""
列出PDF中的签名域（按 /AcroForm 顺序），并给出每页的签名控件。
"""

from __future__ import annotations

import argparse
from pathlib import Path

from sarabun_pdf.doc_gen.pdf_engine import count_pdf_pages, list_signature_fields, signature_fields_by_page


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--pdf", required=True)
    ap.add_argument("--by-page", action="store_true", help="按页列出")
    args = ap.parse_args()

    data = Path(args.pdf).read_bytes()
    print(f"pages: {count_pdf_pages(data)}")
    if args.by_page:
        for i, names in enumerate(signature_fields_by_page(data), start=1):
            print(f"  p{i}: {', '.join(names) or '-'}")
        return
    for name in list_signature_fields(data):
        print(name)


if __name__ == "__main__":
    main()
