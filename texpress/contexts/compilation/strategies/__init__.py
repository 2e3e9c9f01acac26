"""
Compilation strategies.

One module per backend. Every strategy implements the CompilationStrategy
interface from base.py so the orchestrator can try them interchangeably:

- native.py: pdflatex on the host (native-toolchain)
- docker.py: pdflatex inside a TeX Live container (toolchain-equivalent)
- browser.py: markup -> HTML -> headless Chromium print (html-rendered)
- remote_api.py: texlive.net compile service (remote-api-dependent)
- manual.py: structural parse + reportlab layout (manual-parsed, always available)
"""
