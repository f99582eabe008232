# ------------------------------
# HTML + CSS + JS
# ------------------------------
HTML_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>Excel Search Dashboard</title>
  <style>
    * { margin:0; padding:0; box-sizing:border-box; }
    :root{
      --brand:#2563eb; --brand2:#06b6d4; --ok:#16a34a; --ink:#222; --muted:#666;
      --panel:#ffffff; --divider:#e6e8f0; --tableGrid:#e9ecf5; --accent:#00bcd4;
      --warn:#ef4444; --highlight:#fde047; --shadow:0 0 0 1px rgba(0,0,0,.03), 0 6px 18px rgba(0,0,0,.06);
    }
    body { font-family:'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; background:linear-gradient(90deg,#eff6ff 0%,#ecfeff 100%); min-height:100vh; padding:20px; color:var(--ink); }
    .container { max-width:1200px; margin:0 auto; }
    .header { text-align:center; color:var(--brand); margin-bottom:28px; }
    .header h1 { font-size:2.4em; font-weight:700; margin-bottom:8px; }
    .main-panel { background:rgba(255,255,255,.96); border-radius:20px; box-shadow:0 20px 40px rgba(0,0,0,.08); overflow:hidden; }
    .section { padding:26px 40px; background:var(--panel); }
    .section + .section { border-top:1px solid var(--divider); }
    .subhead { font-weight:800; font-size:14px; color:#4a4a4a; letter-spacing:.12em; text-transform:uppercase; margin-bottom:12px; }
    .desc { color:#555; font-size:13px; margin-top:4px; }
    .meta { color:var(--muted); font-style:italic; font-size:14px; }
    .card { background:#fff; border:1px solid var(--divider); border-radius:12px; padding:16px; box-shadow:var(--shadow); }
    .admin-card { background:#fdf2f8; border-color:#fbcfe8; }
    .row { display:flex; gap:10px; align-items:center; margin-top:8px; flex-wrap:wrap; }
    input[type="text"], input[type="password"] { flex:1; padding:12px 15px; border:2px solid #bfdbfe; border-radius:8px; font-size:14px; }
    button { padding:10px 18px; background:var(--brand); color:#fff; border:none; border-radius:8px; cursor:pointer; font-weight:600; }
    button.danger { background:var(--warn); padding:4px 10px; font-size:12px; }
    button.ok { background:var(--ok); }
    button.print { background:#9333ea; }
    button.link { background:none; color:var(--brand); text-decoration:underline; padding:0 3px; font-weight:400; }
    .filelist { margin-top:14px; }
    .fileitem { display:flex; justify-content:space-between; align-items:center; background:#fff; border:1px solid var(--divider); border-radius:8px; padding:8px 12px; margin-top:6px; font-size:14px; }
    .status.success { color:var(--ok); } .status.error { color:var(--warn); } .status.uploading { color:#ea580c; }
    .alert { padding:12px; margin:20px 40px 0; border-radius:8px; display:none; }
    .alert.success { background:#dcfce7; color:#166534; } .alert.error { background:#fee2e2; color:#991b1b; }
    .results-stats { background:#eef8ff; color:#0a4a6b; padding:10px 14px; border-radius:10px; border-left:4px solid var(--accent); margin-bottom:12px; }
    .file-result { margin-top:18px; }
    .file-result h4 { color:var(--brand); margin-bottom:8px; display:flex; justify-content:space-between; flex-wrap:wrap; }
    .results-table { background:#fff; border-radius:12px; overflow:auto; box-shadow:var(--shadow); border:1px solid var(--divider); }
    table { width:100%; border-collapse:collapse; font-size:14px; }
    th, td { padding:10px 12px; border:1px solid var(--tableGrid); text-align:left; vertical-align:top; }
    thead th { background:#dbeafe; color:#1e40af; }
    tr.flash td { background:#fed7aa; transition:background .3s; }
    mark.highlight { background:var(--highlight); font-weight:700; }
  </style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>📊 Excel Search Dashboard</h1>
      <p class="meta">Page loaded: {{ page_load_time }}</p>
    </div>

    <div class="main-panel">
      <div class="alert" id="alertBox"></div>

      <!-- Admin -->
      <div class="section">
        <div class="subhead">Admin</div>
        {% if is_admin %}
        <div class="card admin-card">
          <div class="desc"><strong>Your IP:</strong> {{ client_ip }}</div>
          <div class="row">
            <input type="file" id="fileInput" accept="{{ accept }}" multiple />
            <button onclick="uploadFiles()">Upload</button>
            <button class="danger" onclick="adminLogout()">Log out</button>
          </div>
          <div id="uploadStatuses"></div>
          <div class="filelist">
            <div class="subhead">Uploaded Files</div>
            <div id="fileList"></div>
          </div>
        </div>
        {% else %}
        <div class="row">
          <input type="password" id="adminPassword" placeholder="Admin password" />
          <button onclick="adminLogin()">Admin Mode</button>
        </div>
        {% endif %}
      </div>

      <!-- Search -->
      <div class="section">
        <div class="subhead">Search</div>
        <div class="row">
          <input type="text" id="searchInput" placeholder="Search keywords separated by commas..." />
          <button onclick="performSearch()">🔍 Search</button>
        </div>
      </div>

      <!-- Results -->
      <div class="section" id="resultsSection" style="display:none;">
        <div class="subhead">Search Results</div>
        <div class="results-stats" id="resultsStats"></div>
        <div id="resultsBody"></div>
        <div class="row" id="exportButtons" style="display:none;">
          <button class="ok" onclick="download('/download')">📥 Export to Excel</button>
          <button class="ok" onclick="download('/download_csv')">⬇️ CSV</button>
          <button class="print" onclick="download('/print')">🖨️ Print</button>
        </div>
      </div>
    </div>
  </div>

  <script>
    let lastQuery = '';
    let lastUpload = {{ last_upload|tojson }};

    function escapeHtml(s){ return String(s).replace(/&/g,'&amp;').replace(/</g,'&lt;').replace(/>/g,'&gt;').replace(/"/g,'&quot;'); }

    async function parseResponseAsJson(resp){
      const text = await resp.text();
      const ct = resp.headers.get('content-type') || '';
      if (ct.includes('application/json')) {
        try { return JSON.parse(text); }
        catch (e) { throw new Error('Bad JSON from server: ' + (e?.message || e)); }
      }
      throw new Error(`Non-JSON response (${resp.status}):\n` + text.slice(0, 2000));
    }

    function showAlert(message,type){
      const a=document.getElementById('alertBox');
      a.className=`alert ${type}`; a.textContent=message; a.style.display='block';
      setTimeout(()=>{a.style.display='none';},7000);
    }

    // ------- Admin -------
    function adminLogin(){
      const password=document.getElementById('adminPassword').value;
      fetch('/admin/login', { method:'POST', headers:{'Content-Type':'application/json'}, body: JSON.stringify({password}) })
        .then(parseResponseAsJson)
        .then(data=>{ if(data.success){ window.location.reload(); } else { showAlert(data.error,'error'); } })
        .catch(e=> showAlert(String(e),'error'));
    }
    function adminLogout(){
      fetch('/admin/logout', { method:'POST' }).then(()=> window.location.reload());
    }

    function refreshFiles(){
      const holder=document.getElementById('fileList');
      if(!holder) return;
      fetch('/files').then(parseResponseAsJson).then(data=>{
        if(!data.files.length){ holder.innerHTML='<p class="desc">No files uploaded yet.</p>'; return; }
        holder.innerHTML = data.files.map(f=>
          `<div class="fileitem"><span><strong>${escapeHtml(f.fileName)}</strong> <span class="desc">📅 ${escapeHtml(f.uploadDate)} · ${f.rows} rows</span></span>
           <button class="danger" data-name="${escapeHtml(f.fileName)}" onclick="deleteFile(this.dataset.name)">Delete</button></div>`
        ).join('');
        lastUpload = data.lastUpload;
      });
    }

    function uploadFiles(){
      const input=document.getElementById('fileInput');
      if(!input.files.length) return;
      const formData=new FormData();
      const names=[];
      for(const f of input.files){ formData.append('files', f); names.push(f.name); }
      const statuses=document.getElementById('uploadStatuses');
      statuses.innerHTML = names.map(n=>`<div class="status uploading">Uploading: ${escapeHtml(n)}...</div>`).join('');
      fetch('/upload', { method:'POST', body:formData })
        .then(parseResponseAsJson)
        .then(data=>{
          if(!data.items){ showAlert('Upload failed: '+data.error,'error'); return; }
          statuses.innerHTML = data.items.map(it=>
            `<div class="status ${it.status}">${it.status==='success' ? '✅ Upload successful' : '❌ Upload failed'}: ${escapeHtml(it.fileName)}${it.error ? ' ('+escapeHtml(it.error)+')' : ''}</div>`
          ).join('');
          input.value='';
          refreshFiles();
        })
        .catch(e=> showAlert(String(e),'error'));
    }

    function deleteFile(name){
      fetch('/files/'+encodeURIComponent(name), { method:'DELETE' })
        .then(parseResponseAsJson)
        .then(data=>{ if(!data.success){ showAlert(data.error,'error'); } refreshFiles(); })
        .catch(e=> showAlert(String(e),'error'));
    }

    // ------- Search -------
    function performSearch(){
      const query=document.getElementById('searchInput').value;
      fetch('/search', { method:'POST', headers:{'Content-Type':'application/json'}, body: JSON.stringify({query}) })
        .then(parseResponseAsJson)
        .then(data=>{
          if(!data.success){ showAlert('Search failed: '+data.error,'error'); return; }
          lastQuery = query;
          lastUpload = data.lastUpload;
          render(data);
        })
        .catch(e=> showAlert(String(e),'error'));
    }
    document.getElementById('searchInput').addEventListener('keypress', e=>{ if(e.key==='Enter'){ performSearch(); }});

    function rowId(fileName, serial){ return `result-${fileName.replace(/\s/g,'-')}-${serial}`; }
    function jumpTo(id){
      const el=document.getElementById(id);
      if(!el) return;
      el.scrollIntoView({ behavior:'smooth', block:'center' });
      el.classList.add('flash'); setTimeout(()=> el.classList.remove('flash'), 1500);
    }

    function render(data){
      const stats=document.getElementById('resultsStats');
      const body=document.getElementById('resultsBody');
      const perTerm = data.matchesPerTerm.map(([t,c])=>`<strong>${escapeHtml(t)}</strong>: ${c}`).join(', ');
      stats.innerHTML = `<div class="desc"><strong>Last Excel Upload:</strong> ${escapeHtml(lastUpload || 'Not uploaded yet')}</div>
        <div><strong>Total Matches:</strong> ${data.totalMatches}</div>
        ${perTerm ? `<div class="desc"><strong>Matches per keyword:</strong> ${perTerm}</div>` : ''}`;

      if(!data.terms.length){
        body.innerHTML='<p class="desc">Please type something to search.</p>';
      } else if(!data.results.length){
        body.innerHTML='<p class="desc">No matches found.</p>';
      } else {
        body.innerHTML = data.results.map(fr=>{
          const links = fr.matches.map(m=>`<button class="link" onclick="jumpTo('${rowId(fr.fileName, m.serialNumber)}')">${m.serialNumber}</button>`).join('');
          const ths = ['S.NO', ...fr.header].map(h=>`<th>${escapeHtml(h)}</th>`).join('');
          // html cells are escaped server-side
          const trs = fr.matches.map(m=>`<tr id="${escapeHtml(rowId(fr.fileName, m.serialNumber))}"><td>${m.serialNumber}</td>${m.html.map(h=>`<td>${h}</td>`).join('')}</tr>`).join('');
          return `<div class="file-result"><h4><span>File: ${escapeHtml(fr.fileName)} (${fr.matchCount} matches)</span><span class="desc">Jump to: ${links}</span></h4>
            <div class="results-table"><table><thead><tr>${ths}</tr></thead><tbody>${trs}</tbody></table></div></div>`;
        }).join('');
      }
      document.getElementById('exportButtons').style.display = data.results.length ? 'flex' : 'none';
      document.getElementById('resultsSection').style.display='block';
    }

    function download(path){
      if(!lastQuery.trim()){ showAlert('No results to export.','error'); return; }
      window.location.href = path + '?q=' + encodeURIComponent(lastQuery);
    }

    refreshFiles();
  </script>
</body>
</html>
"""

PRINT_TEMPLATE = r"""
<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <title>Search Results</title>
  <style>
    body { font-family:'Segoe UI', Tahoma, Geneva, Verdana, sans-serif; padding:20px; }
    table { width:100%; border-collapse:collapse; margin-bottom:20px; }
    th, td { border:1px solid #ddd; padding:12px; text-align:left; }
    th { background-color:#e0f0ff; font-weight:bold; }
    mark.highlight { background-color:yellow; font-weight:bold; }
  </style>
</head>
<body onload="window.print()">
  <h3>Search Results</h3>
  <p>Keywords: {{ result.terms|join(', ') }} &middot; Total Matches: {{ result.total_matches }}</p>
  {% for file_result in result.results %}
  <h4>File: {{ file_result.file_name }} ({{ file_result.matches|length }} matches)</h4>
  <table>
    <thead><tr><th>S.NO</th>{% for h in file_result.header %}<th>{{ h }}</th>{% endfor %}</tr></thead>
    <tbody>
    {% for match in file_result.matches %}
      <tr><td>{{ match.serial_number }}</td>{% for cell in match.cells %}<td>{{ highlight(cell) }}</td>{% endfor %}</tr>
    {% endfor %}
    </tbody>
  </table>
  {% else %}
  <p>No matches found.</p>
  {% endfor %}
</body>
</html>
"""
