"""
Packaging of generated code into downloadable multi-file projects.
"""

import json
import zipfile
from io import BytesIO
from pathlib import Path
from typing import Dict, Union

from napkin2web.models import Framework


REACT_MAIN = """import React from 'react'
import ReactDOM from 'react-dom/client'
import App from './App.tsx'
import './index.css'

ReactDOM.createRoot(document.getElementById('root')!).render(
  <React.StrictMode>
    <App />
  </React.StrictMode>,
)
"""

TAILWIND_CSS = """@tailwind base;
@tailwind components;
@tailwind utilities;
"""

REACT_TAILWIND_CONFIG = """/** @type {import('tailwindcss').Config} */
export default {
  content: [
    "./index.html",
    "./src/**/*.{js,ts,jsx,tsx}",
  ],
  theme: {
    extend: {},
  },
  plugins: [],
}
"""

REACT_INDEX_HTML = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Generated React App</title>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/src/main.tsx"></script>
  </body>
</html>
"""

NEXTJS_LAYOUT = """import './globals.css'
import { Inter } from 'next/font/google'

const inter = Inter({ subsets: ['latin'] })

export const metadata = {
  title: 'Generated Next.js App',
  description: 'Created with Napkin2Web',
}

export default function RootLayout({
  children,
}: {
  children: React.ReactNode
}) {
  return (
    <html lang="en">
      <body className={inter.className}>{children}</body>
    </html>
  )
}
"""

NEXTJS_TAILWIND_CONFIG = """import type { Config } from 'tailwindcss'

const config: Config = {
  content: [
    './src/pages/**/*.{js,ts,jsx,tsx,mdx}',
    './src/components/**/*.{js,ts,jsx,tsx,mdx}',
    './src/app/**/*.{js,ts,jsx,tsx,mdx}',
  ],
  theme: {
    extend: {},
  },
  plugins: [],
}
export default config
"""

NEXTJS_CONFIG = """/** @type {import('next').NextConfig} */
const nextConfig = {
    output: 'export'
}
module.exports = nextConfig
"""


def _package_json(name: str, dependencies: Dict[str, str]) -> str:
    return json.dumps({"name": name, "version": "1.0.0", "dependencies": dependencies}, indent=2)


def static_project(code: str) -> Dict[str, str]:
    return {"index.html": code}


def react_project(code: str) -> Dict[str, str]:
    return {
        "package.json": _package_json("napkin-generated-react", {
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
            "lucide-react": "^0.263.1",
            "tailwindcss": "^3.3.3",
        }),
        "src/App.tsx": code,
        "src/main.tsx": REACT_MAIN,
        "src/index.css": TAILWIND_CSS,
        "tailwind.config.js": REACT_TAILWIND_CONFIG,
        "index.html": REACT_INDEX_HTML,
    }


def nextjs_project(code: str) -> Dict[str, str]:
    return {
        "package.json": _package_json("napkin-generated-nextjs", {
            "next": "14.0.0",
            "react": "^18.2.0",
            "react-dom": "^18.2.0",
            "lucide-react": "^0.263.1",
            "tailwindcss": "^3.3.3",
        }),
        "src/app/page.tsx": code,
        "src/app/layout.tsx": NEXTJS_LAYOUT,
        "src/app/globals.css": TAILWIND_CSS,
        "tailwind.config.ts": NEXTJS_TAILWIND_CONFIG,
        "next.config.js": NEXTJS_CONFIG,
    }


PROJECT_BUILDERS = {
    Framework.STATIC: static_project,
    Framework.REACT: react_project,
    Framework.NEXTJS: nextjs_project,
}


class ProjectPackager:
    """Builds project file trees and zip archives from generated code."""

    def project_files(self, code: str, framework: Framework) -> Dict[str, str]:
        """
        Lay out the files of a project for the given framework.

        Args:
            code: Canonical generated code.
            framework: Framework the code was generated for.

        Returns:
            Mapping of relative file path to file content.
        """
        return PROJECT_BUILDERS[Framework(framework)](code)

    def archive_name(self, framework: Framework) -> str:
        return f"napkin2web-{Framework(framework).value}-project.zip"

    def build_zip(self, code: str, framework: Framework) -> bytes:
        """Zip archive of the project, as bytes."""
        buffer = BytesIO()
        with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
            for path, content in self.project_files(code, framework).items():
                archive.writestr(path, content)
        return buffer.getvalue()

    def save_zip(self, code: str, framework: Framework, output_dir: Union[str, Path] = "outputs") -> Path:
        """
        Write the project archive to disk.

        Returns:
            Path to the saved zip file.
        """
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        zip_path = output_dir / self.archive_name(framework)
        zip_path.write_bytes(self.build_zip(code, framework))
        return zip_path

    def save_project(self, code: str, framework: Framework, output_dir: Union[str, Path]) -> Path:
        """
        Write the project files into a directory.

        Returns:
            Path to the project directory.
        """
        project_dir = Path(output_dir)
        for path, content in self.project_files(code, framework).items():
            file_path = project_dir / path
            file_path.parent.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        return project_dir
