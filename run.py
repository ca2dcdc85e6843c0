#!/usr/bin/env python
import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(__file__))

if __name__ == '__main__':
    import uvicorn
    from mascate_pro.core.config import settings
    from mascate_pro.main import app

    uvicorn.run(
        app,
        host=settings.HOST,
        port=settings.PORT,
        reload=False
    )
