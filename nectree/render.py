from html import escape
from typing import Iterable, List, Mapping

from .models import Link

LINKS_MARKER = "<!-- links -->"

EMPTY_PLACEHOLDER = '<p class="empty">No links yet.</p>'

PAGE_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <title>NecTree</title>
    <link rel="icon" href="favicon.ico">
    <style>
        body {
            font-family: Arial, sans-serif;
            max-width: 640px;
            margin: 2em auto;
        }
        h2 {
            color: #333;
        }
        ul.links {
            list-style: none;
            padding: 0;
        }
        li.link {
            border: 1px solid #ddd;
            border-radius: 6px;
            padding: 0.5em;
            margin-bottom: 0.5em;
        }
        li.link img {
            max-width: 100px;
            max-height: 100px;
            vertical-align: middle;
            margin-right: 0.5em;
        }
        p.empty {
            color: #777;
        }
    </style>
</head>
<body>
    <h2>NecTree</h2>
    <form id="linkForm">
        <label for="name">Name:</label><br>
        <input type="text" id="name" name="name" required><br>
        <label for="url">URL:</label><br>
        <input type="text" id="url" name="url" required><br>
        <label for="image">Image URL:</label><br>
        <input type="text" id="image" name="image"><br>
        <label for="description">Description:</label><br>
        <input type="text" id="description" name="description"><br>
        <label for="order">Order:</label><br>
        <input type="number" id="order" name="order" min="0" value="0"><br>
        <input type="submit" value="Add Link">
    </form>
    <!-- links -->
    <script>
        function postOperation(operation) {
            return fetch('post', {
                method: 'POST',
                headers: {'Content-Type': 'application/json'},
                body: JSON.stringify(operation)
            }).then(function () {
                location.reload();
            });
        }

        document.getElementById('linkForm').addEventListener('submit', function (event) {
            event.preventDefault();
            postOperation({
                Save: {
                    name: document.getElementById('name').value,
                    url: document.getElementById('url').value,
                    image: document.getElementById('image').value,
                    description: document.getElementById('description').value,
                    order: Number(document.getElementById('order').value)
                }
            });
        });

        var deleteButtons = document.getElementsByClassName('delete-button');
        for (var i = 0; i < deleteButtons.length; i++) {
            deleteButtons[i].addEventListener('click', function (event) {
                event.preventDefault();
                postOperation({Delete: {name: event.target.getAttribute('data-name')}});
            });
        }
    </script>
</body>
</html>
"""


def sort_links(links: Iterable[Link]) -> List[Link]:
    # name breaks ties so equal orders still render the same way every time
    return sorted(links, key=lambda link: (link.order, link.name))


def render_link(link: Link) -> str:
    # an empty src makes browsers request the page again
    image = f'<img src="{escape(link.image)}" alt="{escape(link.name)}">' if link.image else ""
    return (
        '<li class="link">'
        f'<a target="_blank" rel="noopener" href="{escape(link.url)}">'
        f"{image}{escape(link.name)}</a>"
        f"<p>{escape(link.description)}</p>"
        f'<button class="delete-button" data-name="{escape(link.name)}">X</button>'
        "</li>"
    )


def render_links(links: Iterable[Link]) -> str:
    ordered = sort_links(links)
    if not ordered:
        return EMPTY_PLACEHOLDER
    items = "\n".join(render_link(link) for link in ordered)
    return f'<ul class="links">\n{items}\n</ul>'


def render_html(snapshot: Mapping[str, Link]) -> str:
    """Render the whole page for a link tree snapshot. Pure: same snapshot, same bytes."""
    return PAGE_TEMPLATE.replace(LINKS_MARKER, render_links(snapshot.values()), 1)
