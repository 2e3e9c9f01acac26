"""Shared fixtures for TeXpress tests."""

import pytest

from texpress.contexts.parsing.document import Document
from texpress.contexts.rendering.layout_renderer import render_document
from texpress.utils.settings import load_settings

SAMPLE_RESUME = r"""\documentclass[letterpaper,11pt]{article}
\usepackage{titlesec}
\usepackage{latexsym}
\usepackage[hidelinks]{hyperref}
\usepackage{enumitem}

\newcommand{\resumeItem}[1]{\item\small{#1}}
\newcommand{\resumeSubheading}[4]{
  \item
    \begin{tabular*}{0.97\textwidth}[t]{l@{\extracolsep{\fill}}r}
      \textbf{#1} & #2 \\
      \textit{\small#3} & \textit{\small #4} \\
    \end{tabular*}
}
\newcommand{\resumeSubHeadingListStart}{\begin{itemize}[leftmargin=0.15in, label={}]}
\newcommand{\resumeSubHeadingListEnd}{\end{itemize}}
\newcommand{\resumeItemListStart}{\begin{itemize}}
\newcommand{\resumeItemListEnd}{\end{itemize}}

\begin{document}

\begin{center}
    \textbf{\Huge \scshape Jane Doe} \\ \vspace{1pt}
    \small 555-123-4567 $|$ \href{mailto:jane.doe@example.com}{\underline{jane.doe@example.com}} $|$
    \href{https://linkedin.com/in/janedoe}{\underline{linkedin.com/in/janedoe}} $|$
    \href{https://github.com/janedoe}{\underline{github.com/janedoe}}
\end{center}

\section{Education}
  \resumeSubHeadingListStart
    \resumeSubheading
      {University of Texas}{Austin, TX}
      {Bachelor of Science in Computer Science}{Aug. 2016 -- May 2020}
  \resumeSubHeadingListEnd

\section{Experience}
  \resumeSubHeadingListStart
    \resumeSubheading
      {Software Engineer}{Jun 2020 -- Present}
      {Acme Corp}{Remote}
      \resumeItemListStart
        \resumeItem{Cut build times by 40\% with incremental caching}
        \resumeItem{Built a \textbf{Python} service handling 1M requests/day}
      \resumeItemListEnd
  \resumeSubHeadingListEnd

\section{Technical Skills}
 \begin{itemize}[leftmargin=0.15in, label={}]
    \small{\item{
     \textbf{Languages}{: Python, Go, SQL} \\
     \textbf{Tools}{: Docker, Git}
    }}
 \end{itemize}

\end{document}
"""

MINIMAL_RESUME = r"""\documentclass{article}
\begin{document}
\section{Education}
BS in Physics, State University
\end{document}
"""


@pytest.fixture
def sample_markup() -> str:
    """A small resume in the common one-page template style."""
    return SAMPLE_RESUME


@pytest.fixture
def minimal_markup() -> str:
    """Smallest document every toolchain can compile."""
    return MINIMAL_RESUME


@pytest.fixture
def settings():
    """Fresh settings built from the packaged defaults."""
    return load_settings()


@pytest.fixture
def pdf_bytes() -> bytes:
    """A real one-page PDF from the baseline renderer."""
    return render_document(Document(name="Fixture Person"))
