"""Publish a generated archive as a GitHub gist through the ``gh`` CLI."""

import subprocess
from pathlib import Path

import click

GIST_PREVIEW_URL = "https://gisthost.github.io/?{gist_id}/index.html"

# Rewrites relative links so they keep working under gisthost.github.io/?GIST_ID/file
GIST_PREVIEW_JS = r"""
(function() {
    var hostname = window.location.hostname;
    if (hostname !== 'gisthost.github.io' && hostname !== 'gistpreview.github.io') return;
    var match = window.location.search.match(/^\?([^/]+)/);
    if (!match) return;
    var gistId = match[1];

    function rewriteLink(link) {
        var href = link.getAttribute('href');
        if (!href || href.startsWith('?') || href.startsWith('#')) return;
        if (href.startsWith('http') || href.startsWith('//')) return;
        var hashAt = href.indexOf('#');
        var filename = hashAt === -1 ? href : href.slice(0, hashAt);
        var anchor = hashAt === -1 ? '' : href.slice(hashAt);
        link.setAttribute('href', '?' + gistId + '/' + filename + anchor);
    }

    function rewriteLinks(root) {
        if (root.tagName === 'A') rewriteLink(root);
        root.querySelectorAll('a[href]').forEach(rewriteLink);
    }

    rewriteLinks(document);
    if (document.readyState === 'loading') {
        document.addEventListener('DOMContentLoaded', function() { rewriteLinks(document); });
    }

    // The preview host injects page content after load
    var observer = new MutationObserver(function(mutations) {
        mutations.forEach(function(mutation) {
            mutation.addedNodes.forEach(function(node) {
                if (node.nodeType === 1) rewriteLinks(node);
            });
        });
    });
    (function observeBody() {
        if (document.body) observer.observe(document.body, { childList: true, subtree: true });
        else setTimeout(observeBody, 10);
    })();

    function scrollToFragment() {
        var target = window.location.hash && document.getElementById(window.location.hash.substring(1));
        if (!target) return false;
        target.scrollIntoView({ behavior: 'smooth', block: 'start' });
        return true;
    }
    if (!scrollToFragment()) {
        [100, 300, 500, 1000, 2000].forEach(function(delay) { setTimeout(scrollToFragment, delay); });
    }
})();
"""


def inject_gist_preview_js(output_dir):
    """Inject gist preview JavaScript into all HTML files in the output directory."""
    output_dir = Path(output_dir)
    for html_file in output_dir.glob("*.html"):
        content = html_file.read_text(encoding="utf-8")
        if "</body>" in content:
            content = content.replace(
                "</body>", f"<script>{GIST_PREVIEW_JS}</script>\n</body>", 1
            )
            html_file.write_text(content, encoding="utf-8")


def gist_preview_url(gist_id):
    return GIST_PREVIEW_URL.format(gist_id=gist_id)


def create_gist(output_dir, public=False):
    """Create a GitHub gist from the HTML files in output_dir.

    Returns ``(gist_id, gist_url)``; raises click.ClickException on failure.
    """
    output_dir = Path(output_dir)
    html_files = sorted(output_dir.glob("*.html"))
    if not html_files:
        raise click.ClickException("No HTML files found to upload to gist.")

    cmd = ["gh", "gist", "create", *(str(f) for f in html_files)]
    if public:
        cmd.append("--public")

    try:
        result = subprocess.run(cmd, capture_output=True, text=True, check=True)
    except subprocess.CalledProcessError as e:
        error_msg = e.stderr.strip() if e.stderr else str(e)
        raise click.ClickException(f"Failed to create gist: {error_msg}")
    except FileNotFoundError:
        raise click.ClickException(
            "gh CLI not found. Install it from https://cli.github.com/ and run 'gh auth login'."
        )

    # gh prints the gist URL, e.g. https://gist.github.com/username/GIST_ID
    gist_url = result.stdout.strip()
    gist_id = gist_url.rstrip("/").split("/")[-1]
    return gist_id, gist_url
