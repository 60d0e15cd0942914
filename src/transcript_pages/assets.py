"""CSS and JavaScript embedded in every generated page."""

CSS = """
:root { --bg-color: #f4f5f7; --card-bg: #ffffff; --user-bg: #e8f1fb; --user-border: #1f6feb; --assistant-border: #8c959f; --thinking-bg: #fff8e1; --thinking-border: #f2b705; --tool-bg: #f4ecfa; --tool-border: #8250df; --tool-result-bg: #e9f7ef; --tool-error-bg: #fdecea; --reply-bg: #fff7e6; --reply-border: #e8890c; --commit-bg: #fff3e0; --commit-accent: #d9480f; --text-color: #1f2328; --text-muted: #6e7781; --code-bg: #1e2a32; --code-text: #b5e08b; }
* { box-sizing: border-box; }
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; background: var(--bg-color); color: var(--text-color); margin: 0; padding: 16px; line-height: 1.6; }
.container { max-width: 820px; margin: 0 auto; }
h1 { font-size: 1.5rem; margin-bottom: 24px; padding-bottom: 8px; border-bottom: 2px solid var(--user-border); }
h1 a { color: inherit; text-decoration: none; }
.header-row { display: flex; justify-content: space-between; align-items: center; flex-wrap: wrap; gap: 12px; border-bottom: 2px solid var(--user-border); padding-bottom: 8px; margin-bottom: 24px; }
.header-row h1 { border-bottom: none; padding-bottom: 0; margin-bottom: 0; flex: 1; min-width: 200px; }
.summary-line { color: var(--text-muted); margin-bottom: 24px; }
.message { margin-bottom: 16px; border-radius: 10px; overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,0.1); }
.message.user { background: var(--user-bg); border-left: 4px solid var(--user-border); }
.message.assistant { background: var(--card-bg); border-left: 4px solid var(--assistant-border); }
.message.tool-reply { background: var(--reply-bg); border-left: 4px solid var(--reply-border); }
.message-header { display: flex; justify-content: space-between; align-items: center; padding: 8px 16px; background: rgba(0,0,0,0.03); font-size: 0.85rem; }
.role-label { font-weight: 600; text-transform: uppercase; letter-spacing: 0.5px; }
.user .role-label { color: var(--user-border); }
.tool-reply .role-label { color: var(--reply-border); }
.tool-reply .tool-result { background: transparent; padding: 0; margin: 0; }
time { color: var(--text-muted); font-size: 0.8rem; }
.timestamp-link { color: inherit; text-decoration: none; }
.timestamp-link:hover { text-decoration: underline; }
.message:target { animation: highlight 2s ease-out; }
@keyframes highlight { 0% { background-color: rgba(31, 111, 235, 0.2); } 100% { background-color: transparent; } }
.message-content { padding: 16px; }
.message-content p { margin: 0 0 12px 0; }
.message-content p:last-child { margin-bottom: 0; }
.thinking { background: var(--thinking-bg); border: 1px solid var(--thinking-border); border-radius: 8px; padding: 12px; margin: 12px 0; font-size: 0.9rem; color: var(--text-muted); }
.thinking-label { font-size: 0.75rem; font-weight: 600; text-transform: uppercase; color: #b35c00; margin-bottom: 8px; }
.assistant-text, .user-text { margin: 8px 0; }
.tool-use { background: var(--tool-bg); border: 1px solid var(--tool-border); border-radius: 8px; padding: 12px; margin: 12px 0; }
.tool-header { font-weight: 600; color: var(--tool-border); margin-bottom: 8px; display: flex; align-items: center; gap: 8px; }
.tool-description { font-size: 0.9rem; color: var(--text-muted); margin-bottom: 8px; font-style: italic; }
.tool-result { background: var(--tool-result-bg); border-radius: 8px; padding: 12px; margin: 12px 0; }
.tool-result.tool-error { background: var(--tool-error-bg); }
.image-block img { border-radius: 6px; }
.file-tool { border-radius: 8px; padding: 12px; margin: 12px 0; }
.write-tool { background: #eef7ee; border: 1px solid #4c9f50; }
.edit-tool { background: #fff4e8; border: 1px solid #e8890c; }
.file-tool-header { font-weight: 600; margin-bottom: 4px; display: flex; align-items: center; gap: 8px; font-size: 0.95rem; }
.write-header { color: #2b6e2f; }
.edit-header { color: #b35c00; }
.file-tool-path { font-family: monospace; background: rgba(0,0,0,0.08); padding: 2px 8px; border-radius: 4px; }
.file-tool-fullpath { font-family: monospace; font-size: 0.8rem; color: var(--text-muted); margin-bottom: 8px; word-break: break-all; }
.file-content { margin: 0; }
.edit-section { display: flex; margin: 4px 0; border-radius: 4px; overflow: hidden; }
.edit-label { padding: 8px 12px; font-weight: bold; font-family: monospace; }
.edit-old { background: #fbe9ec; }
.edit-old .edit-label { color: #a4133c; background: #f5c2cd; }
.edit-new { background: #e9f7ef; }
.edit-new .edit-label { color: #1b6e3a; background: #b7e4c7; }
.edit-content { margin: 0; flex: 1; font-size: 0.85rem; }
.edit-replace-all { font-size: 0.75rem; font-weight: normal; color: var(--text-muted); }
.todo-list { background: #eef7ee; border: 1px solid #7cbf80; border-radius: 8px; padding: 12px; margin: 12px 0; }
.todo-header { font-weight: 600; color: #2b6e2f; margin-bottom: 10px; }
.todo-items { list-style: none; margin: 0; padding: 0; }
.todo-item { display: flex; gap: 10px; padding: 6px 0; border-bottom: 1px solid rgba(0,0,0,0.06); font-size: 0.9rem; }
.todo-item:last-child { border-bottom: none; }
.todo-icon { flex-shrink: 0; width: 20px; text-align: center; font-weight: bold; }
.todo-completed .todo-icon { color: #2b6e2f; }
.todo-completed .todo-content { color: #5c8a3a; text-decoration: line-through; }
.todo-in-progress .todo-icon, .todo-in-progress .todo-content { color: #b35c00; font-weight: 500; }
.todo-pending .todo-icon, .todo-pending .todo-content { color: var(--text-muted); }
pre { background: var(--code-bg); color: var(--code-text); padding: 12px; border-radius: 6px; overflow-x: auto; font-size: 0.85rem; line-height: 1.5; margin: 8px 0; white-space: pre-wrap; word-wrap: break-word; }
pre.json { color: #e0e0e0; }
code { background: rgba(0,0,0,0.08); padding: 2px 6px; border-radius: 4px; font-size: 0.9em; }
pre code { background: none; padding: 0; }
.truncatable { position: relative; }
.truncatable.truncated .truncatable-content { max-height: 200px; overflow: hidden; }
.expand-btn { display: none; width: 100%; padding: 6px 16px; margin-top: 4px; background: rgba(0,0,0,0.05); border: 1px solid rgba(0,0,0,0.1); border-radius: 6px; cursor: pointer; font-size: 0.85rem; color: var(--text-muted); }
.truncatable.truncated .expand-btn, .truncatable.expanded .expand-btn { display: block; }
.pagination { display: flex; justify-content: center; gap: 8px; margin: 24px 0; flex-wrap: wrap; }
.pagination a, .pagination span { padding: 5px 10px; border-radius: 6px; text-decoration: none; font-size: 0.85rem; }
.pagination a { background: var(--card-bg); color: var(--user-border); border: 1px solid var(--user-border); }
.pagination .current, .pagination .index-link { background: var(--user-border); color: white; }
.pagination .disabled { color: var(--text-muted); border: 1px solid #ddd; }
details.continuation { margin-bottom: 16px; }
details.continuation summary { cursor: pointer; padding: 12px 16px; background: var(--user-bg); border-left: 4px solid var(--user-border); border-radius: 10px; color: var(--text-muted); }
.index-item { margin-bottom: 16px; border-radius: 10px; overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,0.1); background: var(--user-bg); border-left: 4px solid var(--user-border); }
.index-item a { display: block; text-decoration: none; color: inherit; }
.index-item-header { display: flex; justify-content: space-between; align-items: center; padding: 8px 16px; background: rgba(0,0,0,0.03); font-size: 0.85rem; }
.index-item-number { font-weight: 600; color: var(--user-border); }
.index-item-content { padding: 16px; }
.index-item-stats { padding: 8px 16px 12px 32px; font-size: 0.85rem; color: var(--text-muted); border-top: 1px solid rgba(0,0,0,0.06); }
.index-item-long-text { margin-top: 8px; padding: 12px; background: var(--card-bg); border-radius: 8px; border-left: 3px solid var(--assistant-border); color: var(--text-color); }
.commit-card { margin: 8px 0; padding: 10px 14px; background: var(--commit-bg); border-left: 4px solid var(--commit-accent); border-radius: 6px; }
.commit-card a { text-decoration: none; color: inherit; display: block; }
.commit-card-hash, .index-commit-hash { font-family: monospace; color: var(--commit-accent); font-weight: 600; margin-right: 8px; }
.index-commit { margin-bottom: 12px; padding: 10px 16px; background: var(--commit-bg); border-left: 4px solid var(--commit-accent); border-radius: 8px; }
.index-commit a { display: block; text-decoration: none; color: inherit; }
.index-commit-header { display: flex; justify-content: space-between; align-items: center; font-size: 0.85rem; margin-bottom: 4px; }
#search-box { display: none; align-items: center; gap: 8px; }
#search-box input { padding: 6px 12px; border: 1px solid var(--assistant-border); border-radius: 6px; font-size: 16px; width: 180px; }
#search-box button, #modal-search-btn, #modal-close-btn { background: var(--user-border); color: white; border: none; border-radius: 6px; padding: 6px 10px; cursor: pointer; }
#modal-close-btn { background: var(--text-muted); }
#search-modal[open] { border: none; border-radius: 12px; box-shadow: 0 4px 24px rgba(0,0,0,0.2); padding: 0; width: 90vw; max-width: 900px; height: 80vh; display: flex; flex-direction: column; }
#search-modal::backdrop { background: rgba(0,0,0,0.5); }
.search-modal-header { display: flex; gap: 8px; padding: 16px; border-bottom: 1px solid var(--assistant-border); }
.search-modal-header input { flex: 1; padding: 8px 12px; border: 1px solid var(--assistant-border); border-radius: 6px; font-size: 16px; }
#search-status { padding: 8px 16px; font-size: 0.85rem; color: var(--text-muted); }
#search-results { flex: 1; overflow-y: auto; padding: 16px; }
.search-result { margin-bottom: 16px; border-radius: 8px; overflow: hidden; box-shadow: 0 1px 3px rgba(0,0,0,0.1); }
.search-result a { display: block; text-decoration: none; color: inherit; }
.search-result-page { padding: 6px 12px; background: rgba(0,0,0,0.03); font-size: 0.8rem; color: var(--text-muted); }
.search-result-content { padding: 12px; }
.search-result mark { background: #fff59d; }
@media (max-width: 600px) { body { padding: 8px; } .message-content, .index-item-content { padding: 12px; } pre { font-size: 0.8rem; padding: 8px; } #search-box input { width: 120px; } }
"""

JS = """
document.querySelectorAll('time[data-timestamp]').forEach(function(el) {
    var date = new Date(el.getAttribute('data-timestamp'));
    if (isNaN(date)) return;
    var timeStr = date.toLocaleTimeString(undefined, { hour: '2-digit', minute: '2-digit' });
    if (date.toDateString() === new Date().toDateString()) { el.textContent = timeStr; }
    else { el.textContent = date.toLocaleDateString(undefined, { month: 'short', day: 'numeric' }) + ' ' + timeStr; }
});
document.querySelectorAll('.truncatable').forEach(function(wrapper) {
    var content = wrapper.querySelector('.truncatable-content');
    var btn = wrapper.querySelector('.expand-btn');
    if (content.scrollHeight <= 250) return;
    wrapper.classList.add('truncated');
    btn.addEventListener('click', function() {
        var collapsed = wrapper.classList.toggle('truncated');
        wrapper.classList.toggle('expanded', !collapsed);
        btn.textContent = collapsed ? 'Show more' : 'Show less';
    });
});
"""

# Expects a global ``totalPages`` set by the index template.
SEARCH_JS = r"""
(function() {
    var searchBox = document.getElementById('search-box');
    var searchInput = document.getElementById('search-input');
    var modal = document.getElementById('search-modal');
    var modalInput = document.getElementById('modal-search-input');
    var searchStatus = document.getElementById('search-status');
    var searchResults = document.getElementById('search-results');
    if (!searchBox || !modal) return;
    // fetch() of sibling pages is blocked on file://
    if (window.location.protocol === 'file:') return;
    searchBox.style.display = 'flex';

    var hostname = window.location.hostname;
    var isGistPreview = hostname === 'gisthost.github.io' || hostname === 'gistpreview.github.io';
    var gistMatch = window.location.search.match(/^\?([a-f0-9]+)/i);
    var gistId = isGistPreview && gistMatch ? gistMatch[1] : null;
    var gistOwner = null;

    async function loadGistOwner() {
        if (!gistId || gistOwner) return;
        try {
            var response = await fetch('https://api.github.com/gists/' + gistId);
            if (response.ok) gistOwner = (await response.json()).owner.login;
        } catch (e) {
            console.error('Failed to load gist info:', e);
        }
    }

    function fetchUrl(pageFile) {
        if (gistId && gistOwner) return 'https://gist.githubusercontent.com/' + gistOwner + '/' + gistId + '/raw/' + pageFile;
        return pageFile;
    }

    function linkUrl(pageFile) {
        return gistId ? '?' + gistId + '/' + pageFile : pageFile;
    }

    function escapeHtml(text) {
        var div = document.createElement('div');
        div.textContent = text;
        return div.innerHTML;
    }

    function highlight(element, term) {
        var lower = term.toLowerCase();
        var walker = document.createTreeWalker(element, NodeFilter.SHOW_TEXT, null, false);
        var nodes = [];
        while (walker.nextNode()) {
            if (walker.currentNode.nodeValue.toLowerCase().indexOf(lower) !== -1) nodes.push(walker.currentNode);
        }
        nodes.forEach(function(node) {
            var text = node.nodeValue;
            var span = document.createElement('span');
            var pos = 0, idx;
            while ((idx = text.toLowerCase().indexOf(lower, pos)) !== -1) {
                span.appendChild(document.createTextNode(text.slice(pos, idx)));
                var mark = document.createElement('mark');
                mark.textContent = text.slice(idx, idx + term.length);
                span.appendChild(mark);
                pos = idx + term.length;
            }
            span.appendChild(document.createTextNode(text.slice(pos)));
            node.parentNode.replaceChild(span, node);
        });
    }

    function searchPage(pageFile, html, query) {
        var doc = new DOMParser().parseFromString(html, 'text/html');
        var found = 0;
        doc.querySelectorAll('.message').forEach(function(msg) {
            if ((msg.textContent || '').toLowerCase().indexOf(query.toLowerCase()) === -1) return;
            found++;
            var pageLink = linkUrl(pageFile);
            var clone = msg.cloneNode(true);
            clone.querySelectorAll('a[href^="#"]').forEach(function(a) {
                a.setAttribute('href', pageLink + a.getAttribute('href'));
            });
            highlight(clone, query);
            var result = document.createElement('div');
            result.className = 'search-result';
            result.innerHTML = '<a href="' + pageLink + (msg.id ? '#' + msg.id : '') + '">' +
                '<div class="search-result-page">' + escapeHtml(pageFile) + '</div>' +
                '<div class="search-result-content">' + clone.innerHTML + '</div></a>';
            searchResults.appendChild(result);
        });
        return found;
    }

    async function performSearch(query) {
        if (!query.trim()) {
            searchStatus.textContent = 'Enter a search term';
            return;
        }
        history.replaceState(null, '', window.location.pathname + window.location.search + '#search=' + encodeURIComponent(query));
        searchResults.innerHTML = '';
        if (gistId) {
            searchStatus.textContent = 'Loading gist info...';
            await loadGistOwner();
            if (!gistOwner) {
                searchStatus.textContent = 'Failed to load gist info. Search unavailable.';
                return;
            }
        }
        var found = 0, searched = 0;
        for (var start = 1; start <= totalPages; start += 3) {
            var batch = [];
            for (var i = start; i < start + 3 && i <= totalPages; i++) {
                batch.push('page-' + String(i).padStart(3, '0') + '.html');
            }
            await Promise.all(batch.map(function(pageFile) {
                return fetch(fetchUrl(pageFile))
                    .then(function(response) {
                        if (!response.ok) throw new Error('Failed to fetch ' + pageFile);
                        return response.text();
                    })
                    .then(function(html) { found += searchPage(pageFile, html, query); })
                    .catch(function() {})
                    .finally(function() {
                        searched++;
                        searchStatus.textContent = 'Found ' + found + ' result(s) in ' + searched + '/' + totalPages + ' pages...';
                    });
            }));
        }
        searchStatus.textContent = 'Found ' + found + ' result(s) in ' + totalPages + ' pages';
    }

    function openModal(query) {
        modalInput.value = query || '';
        searchResults.innerHTML = '';
        searchStatus.textContent = '';
        modal.showModal();
        modalInput.focus();
        if (query) performSearch(query);
    }

    function closeModal() {
        modal.close();
        if (window.location.hash.indexOf('#search=') === 0) {
            history.replaceState(null, '', window.location.pathname + window.location.search);
        }
    }

    document.getElementById('search-btn').addEventListener('click', function() { openModal(searchInput.value); });
    searchInput.addEventListener('keydown', function(e) { if (e.key === 'Enter') openModal(searchInput.value); });
    document.getElementById('modal-search-btn').addEventListener('click', function() { performSearch(modalInput.value); });
    modalInput.addEventListener('keydown', function(e) { if (e.key === 'Enter') performSearch(modalInput.value); });
    document.getElementById('modal-close-btn').addEventListener('click', closeModal);
    modal.addEventListener('click', function(e) { if (e.target === modal) closeModal(); });

    if (window.location.hash.indexOf('#search=') === 0) {
        openModal(decodeURIComponent(window.location.hash.slice(8)));
    }
})();
"""
