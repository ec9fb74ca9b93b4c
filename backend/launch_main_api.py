#!/usr/bin/env python3
"""Launch the main API server."""

if __name__ == "__main__":
    import uvicorn

    print("=" * 60)
    print("Starting BurgerLab API on http://127.0.0.1:8000")
    print("Press Ctrl+C to stop")
    print("=" * 60)
    print()

    uvicorn.run(
        "burgerlab.main:app",
        app_dir="src",
        host="127.0.0.1",
        port=8000,
        reload=True
    )
