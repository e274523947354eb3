"""
Management command to populate the database with demo records.

Records are written through the same services the web front end uses, so
the dependant cap and upsert rules apply here too.  Running the command
twice updates the staff rows in place.
"""
from datetime import date, timedelta
import random

from django.core.management.base import BaseCommand

from records.exceptions import DependantLimitReached
from records.models import Outcome
from records.services.dependants import add_dependant
from records.services.staff import register_staff
from records.services.visits import log_visit

STATIONS = ['Central', 'North Camp', 'Harbour', 'Eastern Annex']
RANKS = ['Officer', 'Sergeant', 'Inspector', 'Superintendent']
RELATIONS = ['Spouse', 'Son', 'Daughter', 'Parent']
VISIT_TYPES = ['Exam', 'Treatment', 'Checkup']
CONDITIONS = ['stable', 'critical', 'fair']


class Command(BaseCommand):
    help = 'Populate database with demo staff, dependants and visits'

    def add_arguments(self, parser):
        parser.add_argument('--staff', type=int, default=8, help='number of staff records')
        parser.add_argument('--seed', type=int, default=None, help='random seed for repeatable data')

    def handle(self, *args, **options):
        rng = random.Random(options['seed'])
        self.stdout.write('Creating demo records...')

        staff_list = self.create_staff(rng, options['staff'])
        self.create_dependants(rng, staff_list)
        self.create_visits(rng, staff_list)

        self.stdout.write(self.style.SUCCESS('Demo records created.'))

    def create_staff(self, rng, count):
        staff_list = []
        for i in range(1, count + 1):
            staff, created = register_staff({
                'hospital_number': f'HN{i:04d}',
                'full_name': f'Demo Staff {i}',
                'dob': date(1970 + rng.randint(0, 30), rng.randint(1, 12), rng.randint(1, 28)),
                'gender': 'Male' if i % 2 else 'Female',
                'telephone': f'080{rng.randint(10000000, 99999999)}',
                'force_file_number': f'FF/{rng.randint(1000, 9999)}',
                'station': rng.choice(STATIONS),
                'rank': rng.choice(RANKS),
            })
            staff_list.append(staff)
            self.stdout.write(f"{'Registered' if created else 'Updated'} staff: {staff}")
        return staff_list

    def create_dependants(self, rng, staff_list):
        for staff in staff_list:
            for j in range(rng.randint(0, 4)):
                try:
                    add_dependant(staff.pk, {
                        'name': f'{staff.full_name} Dependant {j + 1}',
                        'relation': rng.choice(RELATIONS),
                        'dob': date(2000 + rng.randint(0, 20), rng.randint(1, 12), rng.randint(1, 28)),
                    })
                except DependantLimitReached:
                    self.stdout.write(self.style.WARNING(f'Dependant limit reached for {staff}'))
                    break

    def create_visits(self, rng, staff_list):
        today = date.today()
        for staff in staff_list:
            for _ in range(rng.randint(1, 3)):
                visit_day = today - timedelta(days=rng.randint(0, 180))
                fields = {
                    'date_visit': visit_day,
                    'reason': rng.choice(['Fever', 'Injury', 'Routine check', 'Headache']),
                    'condition': rng.choice(CONDITIONS),
                    'visit_type': rng.choice(VISIT_TYPES),
                }
                if rng.random() < 0.4:
                    outcome = rng.choice(Outcome.values)
                    fields.update({
                        'admitted': True,
                        'date_admission': visit_day,
                        'outcome': outcome,
                        'discharge_date': visit_day + timedelta(days=rng.randint(1, 10)),
                        'referral_destination': 'General Hospital' if outcome == Outcome.REFERRED else None,
                    })
                log_visit(staff.pk, fields)
