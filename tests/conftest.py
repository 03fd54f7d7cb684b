import bz2

import pytest

HEADER = """<mediawiki xmlns="http://www.mediawiki.org/xml/export-0.10/" xml:lang="en">
  <siteinfo>
    <sitename>Wikipedia</sitename>
  </siteinfo>
"""
FOOTER = "</mediawiki>\n"


def page_xml(title, text, redirect=None):
    """Render one page the way the dump lays it out, one element per line."""
    lines = ["  <page>", f"    <title>{title}</title>", "    <ns>0</ns>"]
    if redirect is not None:
        lines.append(f'    <redirect title="{redirect}" />')
    lines.append("    <revision>")
    text_lines = text.split("\n")
    text_lines[0] = f'      <text bytes="{len(text)}" xml:space="preserve">' + text_lines[0]
    text_lines[-1] += "</text>"
    lines.extend(text_lines)
    lines.extend(["    </revision>", "  </page>"])
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_dump(tmp_path):
    def _write(pages, name="dump.xml"):
        content = HEADER + "".join(pages) + FOOTER
        path = tmp_path / name
        if name.endswith(".bz2"):
            with bz2.open(path, "wt", encoding="utf-8") as handle:
                handle.write(content)
        else:
            path.write_text(content, encoding="utf-8")
        return str(path)

    return _write
