from setuptools import find_packages, setup

setup(
    name="file-meta-lens",
    version="0.3.0",
    description="檔案 metadata 檢視與延伸屬性註記工具",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.10",
    install_requires=[
        "Pillow>=10.0",
        "pypdf>=4.0",
        "mutagen>=1.47",
        "python-magic>=0.4.27",
        "xattr>=1.0",
    ],
    extras_require={
        "heif": ["pillow-heif>=0.13"],
        "test": ["pytest>=7.0", "piexif>=1.1.3"],
    },
    entry_points={
        "console_scripts": ["file-meta-lens=file_meta_lens.main:main"],
    },
)
