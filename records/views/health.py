from django.db import DatabaseError, connections
from django.http import JsonResponse


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        return JsonResponse({'ok': True, 'db': bool(row and row[0] == 1)})
    except DatabaseError:
        return JsonResponse({'ok': False, 'error': 'database unavailable'}, status=500)
