from datetime import date, datetime, timezone

from escola.agenda import services as agenda_services
from escola.core.constants import FUSO_HORARIO
from escola.core.erros import ErroServico
from firestore_fake import TesteComFirestore


class TestGrade(TesteComFirestore):

    def setUp(self):
        super().setUp()
        self.criar('professors/p1', {'name': 'Carla'})
        self.criar('courses/c1', {
            'name': 'Inglês',
            'roomRef': self.ref('rooms/r1'),
            'professorRef': self.ref('professors/p1'),
            'schedule': [
                {'day': 'Segunda', 'startTime': '08:00', 'endTime': '09:00'},
                {'day': 'QUARTA-FEIRA', 'startTime': '08:00', 'endTime': '09:00'},
                {'day': 'Feriado', 'startTime': '08:00', 'endTime': '09:00'},
            ],
        })
        self.criar('uniqueEvents/e1', {
            'name': 'Recital',
            'roomRef': self.ref('rooms/r2'),
            'respRef': self.ref('professors/p404'),
            'date': datetime(2025, 8, 9, 3, 0, tzinfo=timezone.utc),
            'schedule': [{'day': 'SÁBADO', 'startTime': '19:00', 'endTime': '21:00'}],
        })

    def test_indice_dia(self):
        self.assertEqual(agenda_services.indice_dia('Domingo'), 0)
        self.assertEqual(agenda_services.indice_dia('segunda-feira'), 1)
        self.assertEqual(agenda_services.indice_dia('SÁBADO'), 6)
        self.assertIsNone(agenda_services.indice_dia('Feriado'))
        self.assertIsNone(agenda_services.indice_dia(None))

    def test_grade_completa(self):
        with self.assertLogs('escola.agenda.services', level='WARNING'):
            grade = agenda_services.montar_grade()

        semanais = [e for e in grade if not e['isUniqueEvent']]
        self.assertEqual([e['daysOfWeek'] for e in semanais], [[1], [3]])
        self.assertEqual(semanais[0]['title'], 'Inglês - Carla')
        self.assertEqual(semanais[0]['roomId'], 'r1')

        unico = [e for e in grade if e['isUniqueEvent']][0]
        self.assertEqual(unico['title'], 'Recital - Responsável não encontrado')
        self.assertEqual(unico['start'], '2025-08-09T19:00:00-03:00')
        self.assertEqual(unico['end'], '2025-08-09T21:00:00-03:00')

    def test_evento_gravado_a_meia_noite_utc_fica_no_mesmo_dia(self):
        self.criar('uniqueEvents/e2', {
            'name': 'Feira',
            'roomRef': self.ref('rooms/r3'),
            'date': datetime(2025, 8, 9, 0, 0, tzinfo=timezone.utc),
            'schedule': [{'day': 'SÁBADO', 'startTime': '09:00', 'endTime': '12:00'}],
        })

        grade = agenda_services.montar_grade('r3')

        self.assertEqual(grade[0]['start'], '2025-08-09T09:00:00-03:00')
        self.assertEqual(grade[0]['end'], '2025-08-09T12:00:00-03:00')

    def test_filtro_por_sala(self):
        grade = agenda_services.montar_grade('r2')
        self.assertEqual([e['id'] for e in grade], ['e1'])

    def test_professor_lido_uma_vez(self):
        self.criar('courses/c2', {'name': 'Francês', 'professorRef': self.ref('professors/p1'), 'schedule': []})
        agenda_services.montar_grade()
        self.assertEqual(self.db.leituras.count('professors/p1'), 1)


class TestEventoUnico(TesteComFirestore):

    def test_criar_evento(self):
        evento_id = agenda_services.criar_evento_unico(' Recital ', 'r1', 'p1', date(2025, 8, 9), '19:00', '21:00')

        evento = self.db.dados(f'uniqueEvents/{evento_id}')
        self.assertEqual(evento['name'], 'Recital')
        self.assertEqual(evento['roomRef'], self.ref('rooms/r1'))
        self.assertEqual(evento['date'], datetime(2025, 8, 9, tzinfo=FUSO_HORARIO))
        self.assertEqual(evento['schedule'], [{'day': 'SÁBADO', 'startTime': '19:00', 'endTime': '21:00'}])
        self.assertEqual(evento['registeredStudents'], [])

    def test_horario_invertido(self):
        with self.assertRaises(ErroServico) as ctx:
            agenda_services.criar_evento_unico('Recital', 'r1', 'p1', date(2025, 8, 9), '21:00', '19:00')
        self.assertEqual(ctx.exception.codigo, 'invalid-argument')
        self.assertEqual(self.db.documentos, {})
